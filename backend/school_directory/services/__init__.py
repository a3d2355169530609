# Services package init
"""
School Directory — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - SchoolStore:    SQL statements and schema lifecycle for `schools`
    - UploadService:  image validation, storage and cleanup
    - SchoolService:  validate → upload → insert; list, get, stats
"""
