from listing_writer.services.lookup_client import VehicleLookupClient, lookup_client


def get_lookup_client() -> VehicleLookupClient:
    return lookup_client
