# Services package init
"""
FormDrop Backend: Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Services accept plain values, apply business rules, and return schemas.
       They're injected into routes via FastAPI's dependency injection.

Service Inventory:
    - UploadService: stores incoming files, builds their public URLs
    - validate_submission: required-field check producing a SubmissionRecord
    - SubmissionRepository: insert / read-all on the submissions table
    - Notifier: confirmation email with the images attached
    - SubmissionService: orchestrates upload → validate → persist → notify
"""
