"""
School Directory — Web Views Package
======================================

Server-rendered pages that reach the REST API over HTTP through
DirectoryClient, exactly as an external browser client would.

    pages.py    route handlers for /, /schools and /add-school
    client.py   async httpx client for the /api endpoints
    forms.py    submission form rules and image preview
    listing.py  search filter, card images, sample fallback
"""
