"""
Bookstore Backend — Services Layer
====================================

Service Inventory:
    - credentials: Reversible password encoding and comparison
    - UserStore: UserAccount persistence (create, find by id/email)
    - AttachmentService: Attachment validation and per-file storage
    - RegistrationService: Register, register with attachments, login
"""
