from roomrate.repository.pricing_repository import CategoryPrices, PricingRepository

__all__ = ["CategoryPrices", "PricingRepository"]
