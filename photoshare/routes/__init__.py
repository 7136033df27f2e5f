"""
PhotoShare Backend - API Routes Package
=========================================

Route Inventory:
    - auth.py:           /api/auth/register, /login, /logout, /me
    - users.py:          /api/users/me/*, /api/users/{id}/follow*
    - photos.py:         /api/photos feed, detail, upload, visibility, delete
    - images.py:         /api/images/{id}, /api/images/thumbnails/{id}
    - likes.py:          /api/likes
    - comments.py:       /api/photos/{id}/comments, /api/series/{id}/comments,
                         /api/comments/{id}
    - series.py:         /api/series
    - collections.py:    /api/collections
    - notifications.py:  /api/notifications
    - health.py:         /health

Routes stay thin: pull data out of the request, call one service, shape the
response. Business rules and access checks live in services.
"""
