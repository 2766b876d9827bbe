"""Numbered service queues for physical service stations (MQTT-based).

A single Queue Engine process owns the ticket/queue state for a fixed set of
stations (Charging, Releasing, Extraction by default) and coordinates:
- kiosks taking tickets
- counter staff calling / recalling tickets
- displays receiving "now serving" and announcement broadcasts

State is snapshotted to a local JSON file after every change and restored on
startup. See README for how to run.
"""
