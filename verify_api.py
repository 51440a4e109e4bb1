import requests
import json

BASE_URL = "http://localhost:8000/api/v1"
EMAIL = "verify_test@example.com"
PASSWORD = "SecurePassword123!"
ADMIN_EMAIL = "admin@storefront.local"
ADMIN_PASSWORD = "ChangeMe123!"

def print_response(name, response):
    print(f"--- {name} ---")
    print(f"Status: {response.status_code}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)
    print("\n")

def login(email, password):
    resp = requests.post(f"{BASE_URL}/auth/token", data={"username": email, "password": password})
    print_response(f"Login {email}", resp)
    if resp.status_code != 200:
        return None
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}

def run_verification():
    # Run seed_data.py first so item 1 and the admin exist
    print("1. Registering User...")
    resp = requests.post(f"{BASE_URL}/auth/register", json={"email": EMAIL, "password": PASSWORD})
    print_response("Register", resp)

    headers = login(EMAIL, PASSWORD)
    if not headers:
        print("Login failed, aborting.")
        return

    print("2. Adding to cart twice (quantities aggregate)...")
    print_response("Add 1", requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"item_id": 1, "quantity": 1}))
    print_response("Add 2", requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"item_id": 1, "quantity": 1}))

    print("3. Over-adding (expected 409 InsufficientStock)...")
    print_response("Add too many", requests.post(f"{BASE_URL}/cart/add", headers=headers, json={"item_id": 1, "quantity": 10000}))

    print("4. Checkout...")
    resp = requests.post(f"{BASE_URL}/orders/checkout", headers=headers)
    print_response("Checkout", resp)
    if resp.status_code != 201:
        return
    order_id = resp.json()["id"]

    print("5. Checkout again (expected 400 EmptyCart)...")
    print_response("Empty checkout", requests.post(f"{BASE_URL}/orders/checkout", headers=headers))

    print("6. Customer tries to confirm (expected 403)...")
    print_response("Forbidden status", requests.patch(f"{BASE_URL}/orders/{order_id}/status", headers=headers, json={"status": "CONFIRMED"}))

    admin_headers = login(ADMIN_EMAIL, ADMIN_PASSWORD)
    if not admin_headers:
        return
    print("7. Admin confirms the order...")
    print_response("Confirm", requests.patch(f"{BASE_URL}/orders/{order_id}/status", headers=admin_headers, json={"status": "CONFIRMED"}))
    print_response("My orders", requests.get(f"{BASE_URL}/orders/", headers=headers))

if __name__ == "__main__":
    run_verification()
