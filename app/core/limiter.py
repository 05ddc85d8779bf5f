from app.core.config import settings


class _NoopLimiter:
    def limit(self, *_args, **_kwargs):
        def decorator(func):
            return func

        return decorator


def build_limiter(enabled: bool | None = None, default_limits: list[str] | None = None):
    if enabled is None:
        enabled = not settings.is_test
    if not enabled:
        return _NoopLimiter()

    from slowapi import Limiter
    from slowapi.util import get_remote_address

    return Limiter(
        key_func=get_remote_address,
        default_limits=default_limits or [settings.rate_limit_global],
        headers_enabled=False,
    )


limiter = build_limiter()

# Mutating routes share this stricter per-client budget on top of the global one.
write_limit = limiter.limit(settings.rate_limit_write)
