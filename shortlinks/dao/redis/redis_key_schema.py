import functools
from collections.abc import Callable

from shortlinks.models import MappingModel


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return key if self.prefix is None else f'{self.prefix}:{key}'

    return wrapper


class RedisKeySchema:
    """Key names for the two lookup directions of a mapping

        links:<short code>:url     -> long URL
        targets:<long URL>:code    -> short code

    The long URL is embedded verbatim. Hashing it would let two long URLs
    share a targets key and make get_by_long_url() answer for the wrong one.

    Keys are namespaced with an optional prefix, normally '<app name>:<app env>'.
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    def __repr__(self) -> str:
        return f'<RedisKeySchema prefix={self.prefix!r}>'

    @prefix_key
    def link_url_key(self, short_code: str) -> str:
        return f'links:{short_code}:url'

    @prefix_key
    def target_code_key(self, long_url: str) -> str:
        return f'targets:{long_url}:code'

    def mapping_keys(self, mapping: MappingModel) -> dict[str, str]:
        """Both keys of a mapping with their values, ready for MSET/MSETNX"""
        return {
            self.link_url_key(mapping.short_code): mapping.long_url,
            self.target_code_key(mapping.long_url): mapping.short_code,
        }
