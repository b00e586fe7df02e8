"""
Interio Pricing Engine — grid resolution and price calculation for
window-covering products (curtains, blinds, shutters).

    from interio_pricing.engine import calculate_price, get_price_from_grid
    from interio_pricing.services import GridResolver, enrich_template_with_grid
"""
