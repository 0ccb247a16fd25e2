from shortlinks.dao.base.mapping_base_dao import MappingBaseDAO


__all__ = ['MappingBaseDAO']
