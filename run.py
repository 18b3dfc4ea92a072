"""
Loyalty sync entry point.
"""
import os
import sys
import traceback

print("[LoyaltySync] ========================================")
print("[LoyaltySync] Starting Loyalty Sync v1.0.0")
print("[LoyaltySync] ========================================")

config_name = os.getenv('FLASK_ENV', 'production')
print(f"[LoyaltySync] Config: {config_name}")
print(f"[LoyaltySync] PORT: {os.getenv('PORT', 'not set')}")
print(f"[LoyaltySync] SHOPIFY_STORE: {os.getenv('SHOPIFY_STORE') or 'NOT SET'}")

try:
    from loyalty_sync import create_app
    app = create_app(config_name)
    print("[LoyaltySync] App created successfully!")
except Exception as e:
    print(f"[LoyaltySync] FATAL ERROR during app creation: {e}")
    traceback.print_exc()
    sys.exit(1)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 5000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )
