"""Automatic failover for priority-routed Azure Traffic Manager profiles."""
