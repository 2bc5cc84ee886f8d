import redis
from storefront.utils.retry import redis_retry
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

#LUA porownaj i usun, atomicity
_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""

#redis wykonuje skrypt lua atomowo, nikt nie wcisnie sie miedzy GET a DEL
#wiec lock zwolni tylko ten kto go zalozyl


class LockService:
    """
    -flaga "busy" dla wysylki checkoutu (jedna wysylka na koszyk naraz)
    -zwalnianie locka
    -atomowosc przy pomocy lua
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    @staticmethod
    def checkout_key(cart_key: str) -> str:
        return f"checkout:{cart_key}:lock"

    @redis_retry()
    def acquire(self, name: str, owner: str, ttl: int) -> bool:
        logger.info(f"Acquire lock {name} for {owner}")
        #SET checkout:abc:lock "owner" NX EX 30
        return bool(
            self.redis.set(
                name=name,
                value=owner,
                nx=True, #tylko jesli klucz nie istnieje
                ex=ttl, #wygasa sam, nawet jak proces padnie w trakcie wysylki
            )
        )

    @redis_retry()
    def release(self, name: str, owner: str) -> bool:
        logger.info(f"Release lock {name} for {owner}")
        res = self.redis.eval(_RELEASE_LUA, 1, name, owner)
        return bool(res)
