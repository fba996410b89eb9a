import os
import random
import sys
from datetime import date, timedelta

import pandas as pd

# Add 'backend' folder to Python path
sys.path.append(os.path.abspath(os.path.dirname(__file__)))

from database import SessionLocal, init_db
from models.catalog import CatalogDrug
from models.inventory import InventoryOffer, InventoryRequest
from models.pharmacy import Pharmacy, Credential, ACCOUNT_ACTIVE
from utils.normalize import digits_only
from utils.hashing import get_password_hash

# Configuration
DATA_DIR = os.path.join(os.path.dirname(__file__), "data_source")
CATALOG_CSV = os.path.join(DATA_DIR, "master_catalog.csv")
DEMO_PASSWORD = "demo1234"
OFFERS_PER_PHARMACY = 6
REQUESTS_PER_PHARMACY = 3
# End Configuration

SAMPLE_CATALOG = [
    {"barcode": "6221000000001", "english_name": "Panadol Advance 500mg", "arabic_name": "بانادول ادفانس",
     "brand": "GSK", "manufacturer": "GlaxoSmithKline", "category": "Analgesic", "price": 45.0},
    {"barcode": "6221000000018", "english_name": "Augmentin 1g", "arabic_name": "اوجمنتين",
     "brand": "GSK", "manufacturer": "GlaxoSmithKline", "category": "Antibiotic", "price": 120.0},
    {"barcode": "6221000000025", "english_name": "Concor 5mg", "arabic_name": "كونكور",
     "brand": "Merck", "manufacturer": "Merck KGaA", "category": "Cardiology", "price": 78.5},
    {"barcode": "6221000000032", "english_name": "Glucophage 850mg", "arabic_name": "جلوكوفاج",
     "brand": "Merck", "manufacturer": "Merck KGaA", "category": "Diabetes", "price": 39.0},
    {"barcode": "6221000000049", "english_name": "Brufen 400mg", "arabic_name": "بروفين",
     "brand": "Abbott", "manufacturer": "Abbott", "category": "Analgesic", "price": 32.0},
    {"barcode": "6221000000056", "english_name": "Nexium 40mg", "arabic_name": "نيكسيوم",
     "brand": "AstraZeneca", "manufacturer": "AstraZeneca", "category": "Gastro", "price": 210.0},
    {"barcode": "6221000000063", "english_name": "Lipitor 20mg", "arabic_name": "ليبيتور",
     "brand": "Pfizer", "manufacturer": "Pfizer", "category": "Cardiology", "price": 165.0},
    {"barcode": "6221000000070", "english_name": "Ventolin Inhaler", "arabic_name": "فنتولين بخاخ",
     "brand": "GSK", "manufacturer": "GlaxoSmithKline", "category": "Respiratory", "price": 55.0},
]

DEMO_PHARMACIES = [
    {"pharmacy_id": 1001, "pharmacy_name": "El Shifa Pharmacy", "city": "Cairo", "email": "shifa@example.com"},
    {"pharmacy_id": 1002, "pharmacy_name": "Al Nour Pharmacy", "city": "Giza", "email": "nour@example.com"},
    {"pharmacy_id": 1003, "pharmacy_name": "Delta Care Pharmacy", "city": "Alexandria", "email": "delta@example.com"},
]


def load_catalog_frame() -> pd.DataFrame:
    """Reads the catalog CSV when present, otherwise the bundled sample."""
    if os.path.exists(CATALOG_CSV):
        df = pd.read_csv(CATALOG_CSV, dtype={"barcode": str})
    else:
        print(f"No catalog file at {CATALOG_CSV}, using the sample catalog.")
        df = pd.DataFrame(SAMPLE_CATALOG)

    # Clean the data the same way admin approval does
    df["barcode"] = df["barcode"].fillna("").astype(str).map(digits_only)
    df = df[df["barcode"] != ""]
    df = df.dropna(subset=["english_name", "arabic_name"])
    df = df.drop_duplicates(subset=["barcode"])
    df["price"] = pd.to_numeric(df["price"], errors="coerce")
    return df


def load_catalog(session) -> list:
    df = load_catalog_frame()
    session.query(CatalogDrug).delete()

    print(f"Inserting {len(df)} catalog drugs...")
    drugs = []
    for _, row in df.iterrows():
        drug = CatalogDrug(
            barcode=row["barcode"],
            english_name=row["english_name"],
            arabic_name=row["arabic_name"],
            brand=row.get("brand"),
            manufacturer=row.get("manufacturer"),
            category=row.get("category"),
            price=None if pd.isna(row["price"]) else float(row["price"]),
        )
        session.add(drug)
        drugs.append(drug)
    session.flush()
    return drugs


def load_pharmacies(session) -> list:
    pharmacies = []
    for data in DEMO_PHARMACIES:
        pharmacy = session.get(Pharmacy, data["pharmacy_id"])
        if pharmacy is None:
            pharmacy = Pharmacy(account_status=ACCOUNT_ACTIVE, phone="01000000000", **data)
            session.add(pharmacy)
        if not session.query(Credential).filter(Credential.email == data["email"]).first():
            session.add(Credential(
                email=data["email"],
                password_hash=get_password_hash(DEMO_PASSWORD),
                pharmacy_id=data["pharmacy_id"],
            ))
        pharmacies.append(pharmacy)
    session.flush()
    return pharmacies


def load_inventory(session, drugs, pharmacies):
    ids = [p.pharmacy_id for p in pharmacies]
    session.query(InventoryOffer).filter(InventoryOffer.pharmacy_id.in_(ids)).delete(synchronize_session=False)
    session.query(InventoryRequest).filter(InventoryRequest.pharmacy_id.in_(ids)).delete(synchronize_session=False)

    today = date.today()
    for pharmacy in pharmacies:
        for drug in random.sample(drugs, min(OFFERS_PER_PHARMACY, len(drugs))):
            session.add(InventoryOffer(
                pharmacy_id=pharmacy.pharmacy_id,
                drug_id=drug.id,
                english_name=drug.english_name,
                arabic_name=drug.arabic_name,
                manufacturer=drug.manufacturer,
                barcode=drug.barcode,
                expiry_date=today + timedelta(days=random.randint(30, 400)),
                quantity=random.randint(1, 50),
                price=drug.price or round(random.uniform(20, 250), 2),
                discount=random.choice([0, 10, 15, 20, 25, 30]),
            ))
        for drug in random.sample(drugs, min(REQUESTS_PER_PHARMACY, len(drugs))):
            session.add(InventoryRequest(
                pharmacy_id=pharmacy.pharmacy_id,
                drug_id=drug.id,
                english_name=drug.english_name,
                arabic_name=drug.arabic_name,
                barcode=drug.barcode,
                quantity=random.randint(1, 20),
            ))


def populate_database():
    """Main execution function to populate database."""
    init_db()
    session = SessionLocal()
    try:
        drugs = load_catalog(session)
        pharmacies = load_pharmacies(session)
        load_inventory(session, drugs, pharmacies)
        session.commit()
        print(f"Loaded {len(drugs)} drugs and {len(pharmacies)} demo pharmacies (password: {DEMO_PASSWORD}).")
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


if __name__ == "__main__":
    populate_database()
