from shortlinks.service.mapping_service import MappingService
from shortlinks.service.factory import build_mapping_service


__all__ = [
    'MappingService',
    'build_mapping_service',
]
