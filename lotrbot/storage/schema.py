"""
Schema constant and SQL statements for the guild prefix table.

The table name is fixed here and never comes from user input; every value
is sent as a ``%s`` parameter.
"""

PREFIX_TABLE = "lotr_mod_bot_prefix"

CREATE_PREFIX_TABLE = f"""
CREATE TABLE IF NOT EXISTS {PREFIX_TABLE} (
    server_id BIGINT UNSIGNED NOT NULL,
    prefix TEXT NULL,
    PRIMARY KEY (server_id)
)
"""

SELECT_PREFIX = f"SELECT prefix FROM {PREFIX_TABLE} WHERE server_id = %s"

# No-op on conflict: provisioning must not overwrite an assigned prefix
INSERT_PREFIX = (
    f"INSERT INTO {PREFIX_TABLE} (server_id, prefix) VALUES (%s, %s) "
    f"ON DUPLICATE KEY UPDATE server_id = server_id"
)

UPDATE_PREFIX = f"UPDATE {PREFIX_TABLE} SET prefix = %s WHERE server_id = %s"

# CREATE TABLE IF NOT EXISTS leaves an older table as it is, and without a
# unique server_id the INSERT above can no longer detect a conflict
COUNT_SERVER_ID_UNIQUE_INDEXES = (
    "SELECT COUNT(*) FROM information_schema.STATISTICS "
    "WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = %s "
    "AND COLUMN_NAME = 'server_id' AND NON_UNIQUE = 0"
)
