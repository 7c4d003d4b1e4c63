"""
Demo collections the app starts with (same records every launch; the store is
in-memory so edits never outlive the process).
"""

import sqlite3

MEDICINES = [
    # name, category, manufacturer, price, stock, min_stock, expiry, batch, description, dosage, rx
    ("Paracetamol 500mg", "Pain Relief", "Cipla", 25.50, 150, 20, "2025-12-15", "PAR001",
     "Pain relief and fever reducer", "1-2 tablets every 4-6 hours", 0),
    ("Amoxicillin 250mg", "Antibiotics", "Sun Pharma", 85.00, 75, 15, "2025-08-20", "AMX002",
     "Antibiotic for bacterial infections", "As prescribed by doctor", 1),
    ("Cetirizine 10mg", "Antihistamine", "Dr. Reddy's", 45.00, 12, 20, "2025-06-30", "CET003",
     "Allergy relief medication", "1 tablet daily", 0),
    ("Vitamin D3 60000 IU", "Vitamins", "Mankind", 120.00, 200, 30, "2026-01-15", "VIT004",
     "Vitamin D supplement", "1 capsule weekly", 0),
    ("Insulin Glargine", "Diabetes", "Sanofi", 850.00, 8, 10, "2025-03-28", "INS005",
     "Long-acting insulin", "As prescribed by doctor", 1),
]

CUSTOMERS = [
    # name, phone, email, address, total_purchases, last_visit
    ("Rajesh Kumar", "+91 9876543210", "rajesh.kumar@email.com", "123 Main Street, Delhi", 5280.50, "2024-01-15"),
    ("Priya Sharma", "+91 8765432109", None, "456 Oak Avenue, Mumbai", 3450.00, "2024-01-14"),
    ("Amit Patel", "+91 7654321098", "amit.patel@email.com", None, 1890.75, "2024-01-13"),
]

# sale_id, customer_id, customer_name, total, discount, final_total, method, date, time, items
# items: (medicine_id, medicine_name, quantity, price, total)
SALES = [
    ("SO20240115-0001", 1, "Rajesh Kumar", 96.00, 5.00, 91.00, "cash", "2024-01-15", "14:30", [
        (1, "Paracetamol 500mg", 2, 25.50, 51.00),
        (3, "Cetirizine 10mg", 1, 45.00, 45.00),
    ]),
    ("SO20240114-0001", 2, "Priya Sharma", 360.00, 0.00, 360.00, "upi", "2024-01-14", "11:15", [
        (4, "Vitamin D3 60000 IU", 3, 120.00, 360.00),
    ]),
]


def seed(conn: sqlite3.Connection) -> None:
    # Only seed an empty store
    row = conn.execute("SELECT COUNT(*) AS n FROM medicines").fetchone()
    if row and row[0]:
        return

    conn.executemany(
        """
        INSERT INTO medicines(name, category, manufacturer, price, stock, min_stock,
                              expiry_date, batch_number, description, dosage, prescription)
        VALUES (?,?,?,?,?,?,?,?,?,?,?)
        """,
        MEDICINES,
    )
    conn.executemany(
        """
        INSERT INTO customers(name, phone, email, address, total_purchases, last_visit)
        VALUES (?,?,?,?,?,?)
        """,
        CUSTOMERS,
    )
    # Historical sales: stock above already reflects them, so no decrement here.
    for sale_id, cid, cname, total, discount, final_total, method, d, t, items in SALES:
        conn.execute(
            """
            INSERT INTO sales(sale_id, customer_id, customer_name, total, discount,
                              final_total, payment_method, date, time)
            VALUES (?,?,?,?,?,?,?,?,?)
            """,
            (sale_id, cid, cname, total, discount, final_total, method, d, t),
        )
        conn.executemany(
            """
            INSERT INTO sale_items(sale_id, medicine_id, medicine_name, quantity, price, total)
            VALUES (?,?,?,?,?,?)
            """,
            [(sale_id, *it) for it in items],
        )
    conn.commit()
