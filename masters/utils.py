# masters/utils.py
import logging

from masters.models import Party, Product, Vehicle

logger = logging.getLogger(__name__)


def remember_walk_in(vehicle_no=None, party_name=None, product_name=None):
    """
    Add names typed at the console that are not in the master lists yet,
    marked as walk-in so they show up in the pickers next time.
    """
    created = []
    if vehicle_no:
        _, was_created = Vehicle.objects.get_or_create(
            vehicle_no=vehicle_no, defaults={'source': 'walk-in'}
        )
        if was_created:
            created.append(vehicle_no)
    if party_name:
        _, was_created = Party.objects.get_or_create(
            party_name=party_name, defaults={'source': 'walk-in'}
        )
        if was_created:
            created.append(party_name)
    if product_name:
        _, was_created = Product.objects.get_or_create(
            product_name=product_name, defaults={'source': 'walk-in'}
        )
        if was_created:
            created.append(product_name)

    if created:
        logger.info(f"Walk-in master entries added: {', '.join(created)}")
    return created
