"""
Redis 공용 클라이언트

Event Bus(pub/sub + grant 레코드) 전송 계층으로 사용.
"""

from libs.redis.client import get_redis_client, reset_redis_clients

__all__ = [
    "get_redis_client",
    "reset_redis_clients",
]
