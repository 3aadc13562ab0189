from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.reviews"
    label = "reviews"

    def ready(self) -> None:
        from modules.reviews.events import (
            PictureRepliesConfirmed,
            PictureRepliesUploaded,
            ReviewStatusChanged,
            ReviewSubmitted,
        )
        from modules.reviews.handlers import (
            picture_replies_confirmed_handler,
            picture_replies_uploaded_handler,
            review_status_changed_handler,
            review_submitted_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(ReviewSubmitted, review_submitted_handler)
        event_bus.subscribe(ReviewStatusChanged, review_status_changed_handler)
        event_bus.subscribe(PictureRepliesUploaded, picture_replies_uploaded_handler)
        event_bus.subscribe(PictureRepliesConfirmed, picture_replies_confirmed_handler)
