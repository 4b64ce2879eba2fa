from .source import QuerySource, QueryError, StoreError, StoreOpenError
