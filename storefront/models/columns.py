# storefront/models/columns.py
from sqlalchemy import JSON, String
from sqlalchemy.dialects import postgresql

# Supabase stores image lists as text[]; other dialects (SQLite in dev/tests)
# keep them as JSON arrays.
StringArray = JSON().with_variant(postgresql.ARRAY(String()), "postgresql")
