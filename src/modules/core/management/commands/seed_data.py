from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.ad_titles.models import AdTitle
from modules.core.normalization import normalize_title_key
from modules.products.constants import ProductFormat, ProductStatus
from modules.products.models import Product, ProductImageLink, ProductVariant


class Command(BaseCommand):
    help = "Seed database with a realistic development catalog."

    def add_arguments(self, parser):
        parser.add_argument(
            "--user-id",
            default="seller",
            help="Owner id of the seeded catalog (local username or Auth0 sub).",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users_created = self._seed_users()
        products = self._seed_products(options["user_id"])
        variants_created = self._seed_variants(options["user_id"])
        titles_created = self._seed_ad_titles(products)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={users_created}, "
                f"products={len(products)}, "
                f"variants={variants_created}, "
                f"ad_titles={titles_created}"
            )
        )

    def _seed_users(self) -> int:
        User = get_user_model()
        created = 0
        if not User.objects.filter(username="admin").exists():
            User.objects.create_superuser("admin", password="admin123")
            created += 1
        if not User.objects.filter(username="seller").exists():
            User.objects.create_user("seller", password="seller123")
            created += 1
        return created

    def _seed_products(self, user_id: str) -> list[Product]:
        self.stdout.write("Creating simple products...")
        products: list[Product] = []
        catalog = [
            ("ELET-001", "Monitor 27\" IPS", "Acme", Decimal("899.90"), ProductStatus.READY),
            ("ELET-002", "Teclado Mecânico ABNT2", "Acme", Decimal("189.90"), ProductStatus.PUBLISHED),
            ("ELET-003", "Mouse Sem Fio", "Orbit", Decimal("49.90"), ProductStatus.DRAFT),
            ("CASA-001", "Luminária de Mesa LED", "Lumen", Decimal("79.00"), ProductStatus.READY),
            ("CASA-002", "Organizador de Gavetas", "Lumen", Decimal("24.50"), ProductStatus.DRAFT),
            ("ESC-001", "Caderno Universitário 200 folhas", "Folha", Decimal("12.90"), ProductStatus.BLOCKED),
        ]
        for sku, name, brand, cost, status in catalog:
            product, created = Product.objects.get_or_create(
                user_id=user_id,
                sku=sku,
                deleted_at__isnull=True,
                defaults={
                    "product_name": name,
                    "brand": brand,
                    "cost_price": cost,
                    "status": status,
                    "format": ProductFormat.SIMPLE,
                    "stock_quantity": random.randint(0, 40),
                    "stock_minimum": 5,
                    "description": f"{name} da marca {brand}.",
                },
            )
            if created and status != ProductStatus.DRAFT:
                ProductImageLink.objects.create(
                    product=product,
                    user_id=user_id,
                    image_url=f"https://images.example.com/{sku.lower()}.jpg",
                )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating simple products... Done!"))
        return products

    def _seed_variants(self, user_id: str) -> int:
        self.stdout.write("Creating variant products...")
        product, created = Product.objects.get_or_create(
            user_id=user_id,
            product_name="Camiseta Básica Algodão",
            format=ProductFormat.VARIANTS,
            deleted_at__isnull=True,
            defaults={"brand": "Trama", "cost_price": Decimal("18.00")},
        )
        if not created:
            self.stdout.write(self.style.WARNING("Skipping variants (already seeded)."))
            return 0

        # One save per variant: each one claims its SKU in the registry.
        rows = []
        for position, (color, size) in enumerate(
            [("Preta", "P"), ("Preta", "M"), ("Branca", "P"), ("Branca", "M")]
        ):
            rows.append(
                ProductVariant.objects.create(
                    product=product,
                    sku=f"CAM-{color[:3].upper()}-{size}",
                    attributes={"cor": color, "tamanho": size},
                    sort_order=position,
                    stock_quantity=random.randint(0, 15),
                    stock_minimum=3,
                )
            )
        self.stdout.write(self.style.SUCCESS("Creating variant products... Done!"))
        return len(rows)

    def _seed_ad_titles(self, products: list[Product]) -> int:
        self.stdout.write("Creating ad titles...")
        created_count = 0
        for product in products:
            for suffix in ("Envio Imediato", "Original com Nota Fiscal"):
                title = f"{product.product_name} {suffix}"
                _, created = AdTitle.objects.get_or_create(
                    user_id=product.user_id,
                    product=product,
                    title_normalized=normalize_title_key(title),
                    defaults={"title": title},
                )
                created_count += int(created)
        self.stdout.write(self.style.SUCCESS("Creating ad titles... Done!"))
        return created_count
