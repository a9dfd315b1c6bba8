import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("MARKETPLACE_BASE", "http://127.0.0.1:8000")


def add_task(i, user_id, product_id, qty):
    headers = {"X-User-Id": str(user_id)}
    payload = {"product_id": product_id, "quantity": qty}
    try:
        r = requests.post(f"{BASE}/api/cart/items", json=payload, headers=headers, timeout=10)
        return (i, "add", r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "add", "ERR", str(e))


def checkout_task(i, user_id):
    headers = {"X-User-Id": str(user_id)}
    try:
        r = requests.post(f"{BASE}/api/orders", json={}, headers=headers, timeout=20)
        return (i, "checkout", r.status_code, r.text)
    except requests.RequestException as e:
        return (i, "checkout", "ERR", str(e))


def run_add_concurrent(workers, user_id, product_id, qty):
    print(f"Running cart test: workers={workers}, user={user_id}, product={product_id}, qty={qty}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(add_task, i, user_id, product_id, qty) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r[:3])

    cart = requests.get(f"{BASE}/api/cart", headers={"X-User-Id": str(user_id)}, timeout=10).json()
    line = next((it for it in cart.get("items", []) if it["product_id"] == product_id), None)
    print("Final quantity:", line["quantity"] if line else 0, "expected increment:", workers * qty)
    print("Totals:", cart.get("subtotal_cents"), cart.get("delivery_fee_cents"), cart.get("total_cents"))


def run_checkout_concurrent(workers, user_id):
    # only one checkout may win; the rest should see an empty cart
    print(f"Running checkout test: workers={workers}, user={user_id}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [ex.submit(checkout_task, i, user_id) for i in range(workers)]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    print("Orders created:", sum(1 for r in results if r[2] == 201))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrency test tool (cart adds or checkout).")
    sub = parser.add_subparsers(dest="mode", required=True)

    a = sub.add_parser("add")
    a.add_argument("--user", type=int, default=1)
    a.add_argument("--product", type=int, default=1)
    a.add_argument("--qty", type=int, default=1)
    a.add_argument("--workers", type=int, default=8)

    c = sub.add_parser("checkout")
    c.add_argument("--user", type=int, default=1)
    c.add_argument("--workers", type=int, default=8)

    args = parser.parse_args()

    if args.mode == "add":
        run_add_concurrent(args.workers, args.user, args.product, args.qty)
    elif args.mode == "checkout":
        run_checkout_concurrent(args.workers, args.user)
