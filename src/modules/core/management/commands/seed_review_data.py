from __future__ import annotations

import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.carts.constants import CUSTOM_PRODUCT_REF
from modules.carts.models import CartItem
from modules.carts.repositories.django_repository import CartDjangoRepository
from modules.reviews.dtos import (
    CustomerConfirmationDTO,
    PictureReplyDTO,
    SubmitReviewDTO,
    UpdateReviewStatusDTO,
)
from modules.reviews.models import ReviewOrder
from modules.reviews.repositories.django_repository import ReviewOrderDjangoRepository
from modules.reviews.services import ReviewOrderService

CATALOG_REFS = ["cap-classic", "polo-navy", "tote-canvas", "hoodie-grey"]

# (admin decision, uploads pictures, customer confirms)
SCENARIOS = [
    (None, False, False),
    ("approved", False, False),
    ("rejected", False, False),
    ("needs-changes", True, False),
    ("pending", True, True),
    ("approved-processing", False, False),
]


class Command(BaseCommand):
    help = "Seed database with cart items and review orders in assorted states."

    def add_arguments(self, parser):
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Delete existing cart items and review orders first.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding review workflow data...")

        if options["reset"]:
            CartItem.objects.all().delete()
            ReviewOrder.objects.all().delete()

        admin, customers = self._seed_users()
        service = ReviewOrderService(
            review_repository=ReviewOrderDjangoRepository(),
            cart_repository=CartDjangoRepository(),
        )
        reviews_created = 0
        for index, scenario in enumerate(SCENARIOS):
            customer = customers[index % len(customers)]
            with transaction.atomic():
                self._seed_review(service, admin, customer, index, *scenario)
            reviews_created += 1

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"customers={len(customers)}, "
                f"reviews={reviews_created}, "
                f"cart_items={CartItem.objects.count()}"
            )
        )

    def _seed_users(self):
        User = get_user_model()
        admin = User.objects.filter(username="admin").first()
        if admin is None:
            admin = User.objects.create_superuser("admin", password="admin123")
        customers = []
        for username in ("alice", "bruno"):
            user = User.objects.filter(username=username).first()
            if user is None:
                user = User.objects.create_user(
                    username,
                    email=f"{username}@example.com",
                    password=f"{username}123",
                )
            customers.append(user)
        return admin, customers

    def _seed_review(
        self, service, admin, customer, index, decision, uploads, confirms
    ) -> None:
        cart = []
        for position in range(random.randint(1, 3)):
            custom = position == 0 and index % 2 == 1
            cart.append(
                CartItem.objects.create(
                    customer=customer,
                    product_ref=CUSTOM_PRODUCT_REF if custom else random.choice(CATALOG_REFS),
                    quantity=random.randint(1, 5),
                    customization={"text": f"Team {index}", "font": "script"}
                    if custom
                    else None,
                )
            )

        subtotal = Decimal(sum(item.quantity for item in cart) * 12).quantize(
            Decimal("0.01")
        )
        shipping = Decimal("5.00")
        tax = (subtotal * Decimal("0.07")).quantize(Decimal("0.01"))
        review = service.submit(
            customer.pk,
            SubmitReviewDTO(
                items=[
                    {
                        "id": str(item.id),
                        "product_ref": item.product_ref,
                        "quantity": item.quantity,
                        "customization": item.customization,
                    }
                    for item in cart
                ],
                subtotal=subtotal,
                shipping=shipping,
                tax=tax,
                total=subtotal + shipping + tax,
                submitted_at=timezone.now() - timedelta(days=len(SCENARIOS) - index),
            ),
        )

        if uploads:
            service.upload_picture_replies(
                str(review.id),
                [
                    PictureReplyDTO(
                        item_id=str(item.id),
                        image=f"https://images.example.com/proofs/{item.id}.jpg",
                        notes="Proof ready",
                    )
                    for item in cart
                ],
            )
        if decision:
            service.update_status(
                str(review.id),
                UpdateReviewStatusDTO(status=decision, admin_notes="Seeded decision"),
                actor_id=admin.pk,
            )
        if confirms:
            service.confirm_picture_replies(
                customer.pk,
                str(review.id),
                [
                    CustomerConfirmationDTO(item_id=str(item.id), confirmed=True)
                    for item in cart
                ],
            )
