"""
InkPost Backend: API Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - user.py:    POST /api/v1/user/signup       (create account, get token)
                  POST /api/v1/user/signin       (exchange credentials for token)
                  GET  /api/v1/user/auth         (token owner)
    - blog.py:    POST   /api/v1/blog            (create post)
                  GET    /api/v1/blog/bulk       (page of posts)
                  POST   /api/v1/blog/upload     (image to media host)
                  GET    /api/v1/blog/{id}       (single post)
                  PUT    /api/v1/blog/{id}       (update own post)
                  DELETE /api/v1/blog/{id}       (delete own post)
    - health.py:  GET  /health                   (service health check)
    - validation.py: shared JSON body parsing with custom status codes

Routes stay thin: read the request, call a service, shape the response.
Business rules live in services so they can be tested without HTTP.
"""
