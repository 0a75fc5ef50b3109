"""
Flow-card core for the Matchday service.
Decides liveness, classifies live outcomes, projects the next fixture and
formats score snapshots for the automation host.
"""
