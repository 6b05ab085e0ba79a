from app.services.newsletter.service import NewsletterService

__all__ = ["NewsletterService"]
