import json
import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
ORDER_ID = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Carts ===")
cur.execute(
    "SELECT id, client_profile_id, subtotal_cents, delivery_fee_cents, total_cents, updated_at FROM carts ORDER BY id"
)
for cart in cur.fetchall():
    print(cart)
    cur.execute(
        "SELECT product_id, quantity, unit_price_cents, total_price_cents FROM cart_items WHERE cart_id=? ORDER BY id",
        (cart[0],),
    )
    lines = cur.fetchall()
    for line in lines:
        print("   ", line)
    # a cart row must agree with its lines
    if sum(line[3] for line in lines) != cart[2]:
        print("    !! subtotal does not match items")

print("\n=== Recent Orders ===")
cur.execute(
    "SELECT id, client_profile_id, store_id, status, total_cents, order_datetime FROM orders ORDER BY id DESC LIMIT 20"
)
for r in cur.fetchall():
    print(r)

print("\n=== Order Events ===")
if ORDER_ID:
    cur.execute(
        "SELECT order_id, event_type, from_status, to_status, created_by, meta, created_at FROM order_events WHERE order_id=? ORDER BY created_at, id",
        (ORDER_ID,),
    )
else:
    cur.execute(
        "SELECT order_id, event_type, from_status, to_status, created_by, meta, created_at FROM order_events ORDER BY id DESC LIMIT 20"
    )
for r in cur.fetchall():
    meta = r[5]
    try:
        meta = json.loads(meta) if isinstance(meta, str) else meta
    except ValueError:
        pass
    print(
        {
            "order_id": r[0],
            "event_type": r[1],
            "from": r[2],
            "to": r[3],
            "created_by": r[4],
            "meta": meta,
            "created_at": r[6],
        }
    )

conn.close()
