"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

This module defines typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (component.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: round, enclosure, simulation, population, win, recorder
    category: started, rejected, evaluated
    action: success, failed

Example Log Query:
    fields @timestamp, event, message, metadata.round_number
    | filter event = "enclosure.rejected"
    | stats count() by metadata.reason
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - round.*: Round lifecycle
    - enclosure.*: Stroke validation
    - simulation.*: Marble physics lifecycle
    - population.* / win.*: Scoring
    - recorder.*: Round data delivery
    - error.*: Error conditions
    """

    # ========== Round Events ==========
    ROUND_STARTED = "round.started"
    """New round context created (marbles spawned, enclosures empty)."""

    ROUND_RETRIED = "round.retried"
    """Same round configuration restarted after a loss."""

    ROUND_SCORED = "round.scored"
    """Round moved to results phase."""

    CONFIG_LOADED = "config.loaded"
    """Game configuration loaded from YAML."""

    # ========== Enclosure Events ==========
    ENCLOSURE_ACCEPTED = "enclosure.accepted"
    """Stroke accepted as a new enclosure."""

    ENCLOSURE_REJECTED = "enclosure.rejected"
    """Stroke rejected (too few points or overlap)."""

    ENCLOSURE_CAPACITY_REACHED = "enclosure.capacity_reached"
    """Stroke ignored because the round already has every enclosure."""

    # ========== Simulation Events ==========
    SIMULATION_STARTED = "simulation.started"
    """Simulator transitioned idle -> running."""

    SIMULATION_REFUSED = "simulation.refused"
    """Simulation start refused (precondition not met)."""

    SIMULATION_STOPPED = "simulation.stopped"
    """Simulator transitioned running -> idle."""

    # ========== Scoring Events ==========
    POPULATION_COUNTED = "population.counted"
    """Marbles assigned to enclosures."""

    WIN_CONDITION_EVALUATED = "win.evaluated"
    """Win condition computed for a count set."""

    # ========== Recorder Events ==========
    RECORDER_SUCCESS = "recorder.record.success"
    """Round data handed to the recorder."""

    RECORDER_FAILED = "recorder.record.failed"
    """Round data could not be delivered."""

    # ========== Error Events ==========
    SERIALIZATION_ERROR = "error.serialization"
    """Failed to serialize round data to JSON."""

    CONFIG_ERROR = "error.config"
    """Configuration file invalid."""


# Event categories for filtering
ROUND_EVENTS = {
    LogEvent.ROUND_STARTED,
    LogEvent.ROUND_RETRIED,
    LogEvent.ROUND_SCORED,
}

ENCLOSURE_EVENTS = {
    LogEvent.ENCLOSURE_ACCEPTED,
    LogEvent.ENCLOSURE_REJECTED,
    LogEvent.ENCLOSURE_CAPACITY_REACHED,
}

SIMULATION_EVENTS = {
    LogEvent.SIMULATION_STARTED,
    LogEvent.SIMULATION_REFUSED,
    LogEvent.SIMULATION_STOPPED,
}

ERROR_EVENTS = {
    LogEvent.RECORDER_FAILED,
    LogEvent.SERIALIZATION_ERROR,
    LogEvent.CONFIG_ERROR,
}
