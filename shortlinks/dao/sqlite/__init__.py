from shortlinks.dao.sqlite.mapping_sqlite_dao import MappingSQLiteDAO


__all__ = ['MappingSQLiteDAO']
