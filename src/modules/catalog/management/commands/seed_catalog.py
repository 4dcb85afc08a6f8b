from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.catalog.dtos import CreateProductDTO
from modules.catalog.models import Product
from modules.catalog.repositories.django_repository import ProductDjangoRepository
from modules.catalog.services import CatalogService

# (name, category, strength, stock, multiple_of)
CATALOG = [
    ("Paracetamol", "Analgesics", "500mg", 240, 10),
    ("Ibuprofen", "Analgesics", "400mg", 180, 10),
    ("Aspirin", "Analgesics", "300mg", 15, 5),
    ("Amoxicillin", "Antibiotics", "250mg", 120, 20),
    ("Azithromycin", "Antibiotics", "500mg", 60, 3),
    ("Doxycycline", "Antibiotics", "100mg", 0, 10),
    ("Loratadine", "Antihistamines", "10mg", 90, 10),
    ("Cetirizine", "Antihistamines", "10mg", 12, 1),
    ("Omeprazole", "Gastrointestinal", "20mg", 150, 14),
    ("Loperamide", "Gastrointestinal", "2mg", 75, 6),
    ("Vitamin C", "Supplements", "1000mg", 300, 1),
    ("Vitamin D3", "Supplements", "25mcg", 45, 1),
]


class Command(BaseCommand):
    help = "Seed the catalog with a development product set."

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            default=None,
            help="Also create an 'admin' superuser with this password.",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog...")
        created = self._seed_products()
        admin_created = self._seed_admin(options["admin_password"])
        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={created}, admin={int(admin_created)}"
            )
        )

    def _seed_products(self) -> int:
        service = CatalogService(repository=ProductDjangoRepository())
        created = 0
        for name, category, strength, stock, multiple_of in CATALOG:
            exists = (
                Product.objects.alive()
                .filter(name=name, category=category, strength=strength)
                .exists()
            )
            if exists:
                continue
            service.create_product(
                CreateProductDTO(
                    name=name,
                    category=category,
                    strength=strength,
                    stock=stock,
                    multiple_of=multiple_of,
                )
            )
            created += 1
        return created

    def _seed_admin(self, password: str | None) -> bool:
        if not password:
            return False
        User = get_user_model()
        if User.objects.filter(username="admin").exists():
            return False
        User.objects.create_superuser("admin", password=password)
        return True
