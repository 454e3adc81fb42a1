from streetsim.traffic.base.vehicle_registry import VehicleRegistry

__all__ = ['VehicleRegistry']
