"""
Precompute price suggestions once, outside the scheduler.
Usage: cd backend && python -m scripts.precompute_prices [days]
"""
import sys

from roomrate.tasks.pricing_tasks import precompute_price_suggestions


def main():
    days = int(sys.argv[1]) if len(sys.argv) > 1 else 30
    print(f"Precomputing price suggestions for the next {days} days...")

    result = precompute_price_suggestions.apply(kwargs={"days": days}).get(timeout=600)

    print(f"\nPrecompute complete!")
    print(f"  Status: {result.get('status')}")
    print(f"  Computed: {result.get('computed', 0)}")
    print(f"  Failed: {result.get('failed', 0)}")

    if result.get("status") == "failed":
        print(f"\nError: {result.get('error')}")
        sys.exit(1)


if __name__ == "__main__":
    main()
