# Both unique indexes are required: url_long_index is what serializes
# concurrent inserts of the same long URL.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS url (
    long_url varchar not null,
    short_code varchar not null
);

CREATE UNIQUE INDEX IF NOT EXISTS url_short_index on url (short_code);
CREATE UNIQUE INDEX IF NOT EXISTS url_long_index on url (long_url);
"""

INSERT_MAPPING_SQL = 'INSERT INTO url (long_url, short_code) VALUES (?, ?)'
SELECT_BY_SHORT_CODE_SQL = 'SELECT long_url, short_code FROM url WHERE short_code = ?'
SELECT_BY_LONG_URL_SQL = 'SELECT long_url, short_code FROM url WHERE long_url = ?'
