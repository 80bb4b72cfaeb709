"""Seed categories, menu items and the fixed user directory."""

from __future__ import annotations

from resto_pos.models import Category, MenuItem, MenuStatus, User, UserRole

INITIAL_CATEGORIES: tuple[Category, ...] = (
    Category("1", "Makanan Utama"),
    Category("2", "Minuman"),
    Category("3", "Snack"),
    Category("4", "Dessert"),
)

INITIAL_MENUS: tuple[MenuItem, ...] = (
    MenuItem("m1", "Nasi Goreng Spesial", "1", 25000, 50, MenuStatus.ACTIVE, "https://picsum.photos/seed/nasigoreng/200"),
    MenuItem("m2", "Ayam Bakar Madu", "1", 35000, 30, MenuStatus.ACTIVE, "https://picsum.photos/seed/ayambakar/200"),
    MenuItem("m3", "Es Teh Manis", "2", 5000, 100, MenuStatus.ACTIVE, "https://picsum.photos/seed/esteh/200"),
    MenuItem("m4", "Kopi Susu Gula Aren", "2", 18000, 40, MenuStatus.ACTIVE, "https://picsum.photos/seed/kopi/200"),
    MenuItem("m5", "Kentang Goreng", "3", 15000, 25, MenuStatus.ACTIVE, "https://picsum.photos/seed/fries/200"),
    MenuItem("m6", "Pisang Goreng Keju", "4", 12000, 20, MenuStatus.ACTIVE, "https://picsum.photos/seed/banana/200"),
)

USERS: tuple[User, ...] = (
    User("u1", "admin", UserRole.ADMIN, "Budi (Admin)"),
    User("u2", "kasir1", UserRole.CASHIER, "Siti (Kasir)"),
)
