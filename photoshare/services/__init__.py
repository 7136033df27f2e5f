"""
PhotoShare Backend - Services Layer
=====================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Each service is a stateless class receiving the request's
       AsyncSession as its first argument, exposed as a module-level
       singleton (`like_service = LikeService()`).

Service Inventory:
    - security:             password hashing and JWT issue/verify
    - access:               shared visibility and ownership lookups
    - targets:              LikeTarget / CommentTarget / NotificationTarget
    - FileService:          upload validation, resize, thumbnail, storage
    - AuthService:          register and login
    - UserService:          profile, account deletion, "my" listings
    - PhotoService:         feed, detail, upload, visibility, delete
    - SeriesService:        ordered photo sets
    - CollectionService:    private saved-photo sets incl. the default one
    - CommentService:       comments and reply trees
    - LikeService:          toggle-like state machine
    - FollowService:        toggle-follow state machine and listings
    - NotificationService:  fan-out with self/preference/dedup gating
"""
