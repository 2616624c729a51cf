from .shopify_client import CustomerStore, ShopifyCustomerStore, ShopifyError

__all__ = ["CustomerStore", "ShopifyCustomerStore", "ShopifyError"]
