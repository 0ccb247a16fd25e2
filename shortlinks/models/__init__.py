from shortlinks.models.mapping_model import MappingModel


__all__ = ['MappingModel']
