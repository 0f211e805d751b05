"""Starter inventory for an empty store."""
from datetime import date

SAMPLE_ASSETS = [
    {"id": "asset_001", "name": "Canon EOS 80D", "category": "Studio", "brand": "Canon",
     "purchase_date": date(2024, 1, 15), "purchase_price": 15000000,
     "notes": "DSLR camera for photography practicals", "total_quantity": 5},
    {"id": "asset_002", "name": "Tripod Takara VIT-234", "category": "Studio", "brand": "Takara",
     "purchase_date": date(2024, 2, 10), "purchase_price": 450000,
     "notes": "Professional tripod", "total_quantity": 10},
    {"id": "asset_003", "name": 'MacBook Pro 14"', "category": "IT", "brand": "Apple",
     "purchase_date": date(2024, 3, 20), "purchase_price": 35000000,
     "notes": "Laptop for graphic design", "total_quantity": 3},
    {"id": "asset_004", "name": "Wacom Intuos Pro", "category": "IT", "brand": "Wacom",
     "purchase_date": date(2024, 1, 5), "purchase_price": 5000000,
     "notes": "Pen tablet for digital illustration", "total_quantity": 8},
    {"id": "asset_005", "name": "Large Paper Scissors", "category": "ATK", "brand": "Kenko",
     "purchase_date": date(2024, 4, 1), "purchase_price": 35000,
     "notes": "Scissors for handicrafts", "total_quantity": 20},
    {"id": "asset_006", "name": "A2 Drawing Table", "category": "Furniture", "brand": "Local",
     "purchase_date": date(2023, 8, 15), "purchase_price": 1500000,
     "notes": "Drawing table with built-in lamp", "total_quantity": 15},
]

SAMPLE_BORROWERS = [
    {"id": "borrower_001", "name": "Budi Santoso", "role": "Student", "class_name": "XII DKV 1"},
    {"id": "borrower_002", "name": "Ani Wulandari", "role": "Student", "class_name": "XII DKV 2"},
    {"id": "borrower_003", "name": "Dimas Pratama", "role": "Student", "class_name": "XI DKV 1"},
    {"id": "borrower_004", "name": "Siti Nurhaliza", "role": "Student", "class_name": "XI DKV 2"},
    {"id": "borrower_005", "name": "Pak Joko", "role": "Teacher", "class_name": None},
    {"id": "borrower_006", "name": "Bu Sri", "role": "Teacher", "class_name": None},
]
