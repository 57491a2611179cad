# Services package init
"""
InkPost Backend: Services Layer
================================

What:  Business logic sitting between routes (HTTP) and the database.
How:   Services take a session plus validated input models and return
       response models or raise application exceptions.

Service Inventory:
    - token_service: issue_token() / verify_token() (PyJWT)
    - UserService:   signup, signin, token-owner lookup (passlib hashing)
    - BlogService:   post create / update / list / get / delete
    - MediaService:  signed image upload to the media host (httpx + tenacity)
"""
