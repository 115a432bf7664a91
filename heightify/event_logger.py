"""
Event Logging Module
Structured journal of measurement and analysis events
"""

import copy
import json
import logging
import os
import time
from collections import deque
from datetime import datetime, date
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .models import MeasurementSnapshot, SetupComparison

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Event type classifications"""
    MEASUREMENT_STARTED = "measurement_started"
    POINT_PLACED = "point_placed"
    POINT_MISSED = "point_missed"
    MEASUREMENT_COMPLETED = "measurement_completed"
    MARKER_ADJUSTED = "marker_adjusted"
    MEASUREMENT_RESET = "measurement_reset"
    MEASUREMENT_APPLIED = "measurement_applied"
    SETUP_ANALYZED = "setup_analyzed"


class EventLogger:
    """
    Manages event logging with optional JSON output and aggregation

    Features:
    - Per-event JSON records (when a log directory is given)
    - Session aggregation
    - In-memory event buffer
    """

    def __init__(self, log_directory: Optional[str] = None, buffer_size: int = 100):
        """
        Initialize event logger

        Args:
            log_directory: Directory for JSON log files, None for memory only
            buffer_size: Number of recent events to keep in memory
        """
        self.log_directory = log_directory
        self.buffer_size = buffer_size

        if log_directory:
            os.makedirs(log_directory, exist_ok=True)

        # In-memory event buffer
        self.event_buffer = deque(maxlen=buffer_size)

        self.session_metrics = self._empty_metrics()

        # Event ID counter
        self.event_counter = 0

    @staticmethod
    def _empty_metrics() -> Dict:
        return {
            'date': date.today().isoformat(),
            'measurements': {
                'started': 0,
                'completed': 0,
                'applied': 0,
                'results': []
            },
            'picks': {
                'placed': 0,
                'missed': 0
            },
            'adjustments': 0,
            'analyses': {
                'count': 0,
                'optimal': 0
            }
        }

    def log_snapshot(self, event_type: EventType, snapshot: MeasurementSnapshot,
                     timestamp: Optional[float] = None) -> Dict:
        """
        Log a measurement session event

        Args:
            event_type: What happened
            snapshot: Session state after the change
            timestamp: Event timestamp (defaults to now)

        Returns:
            Event record dictionary
        """
        event = self.log_event(event_type, timestamp, snapshot=snapshot.as_dict())

        metrics = self.session_metrics
        if event_type == EventType.MEASUREMENT_STARTED:
            metrics['measurements']['started'] += 1
        elif event_type == EventType.POINT_PLACED:
            metrics['picks']['placed'] += 1
        elif event_type == EventType.POINT_MISSED:
            metrics['picks']['missed'] += 1
        elif event_type == EventType.MEASUREMENT_COMPLETED:
            metrics['picks']['placed'] += 1
            metrics['measurements']['completed'] += 1
            metrics['measurements']['results'].append(snapshot.measurement_result_cm)
        elif event_type == EventType.MARKER_ADJUSTED:
            metrics['adjustments'] += 1
        elif event_type == EventType.MEASUREMENT_APPLIED:
            metrics['measurements']['applied'] += 1

        return event

    def log_analysis(self, comparison: SetupComparison, person_height: float,
                     timestamp: Optional[float] = None) -> Dict:
        """Log the result of a setup analysis"""
        event = self.log_event(
            EventType.SETUP_ANALYZED,
            timestamp,
            person_height=person_height,
            comparison=comparison.as_dict()
        )
        self.session_metrics['analyses']['count'] += 1
        if comparison.is_optimal:
            self.session_metrics['analyses']['optimal'] += 1
        return event

    def log_event(self, event_type: EventType, timestamp: Optional[float] = None, **kwargs) -> Dict:
        """
        Log a generic event by type

        Args:
            event_type: EventType enum value
            timestamp: Event timestamp (defaults to now)
            **kwargs: Additional event-specific data

        Returns:
            Event record dictionary
        """
        if timestamp is None:
            timestamp = time.time()

        event = {
            'event_id': self._get_next_id(),
            'event_type': event_type.value,
            'timestamp': timestamp,
            'datetime': datetime.fromtimestamp(timestamp).isoformat(),
            'data': kwargs
        }

        self.event_buffer.append(event)
        self._save_event_to_disk(event)
        logger.debug("Event %d: %s", event['event_id'], event['event_type'])

        return event

    def _save_event_to_disk(self, event: Dict) -> None:
        if not self.log_directory:
            return

        timestamp = datetime.fromtimestamp(event['timestamp'])
        filename = f"{timestamp.strftime('%Y%m%d_%H%M%S')}_{event['event_id']}_{event['event_type']}.json"
        filepath = os.path.join(self.log_directory, filename)

        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                json.dump(event, f, indent=2)
        except OSError as e:
            logger.warning("Error saving event to disk: %s", e)

    def _get_next_id(self) -> int:
        """Get next event ID"""
        self.event_counter += 1
        return self.event_counter

    def get_recent_events(self, n: int = 10, event_type: Optional[EventType] = None) -> List[Dict]:
        """
        Get recent events from buffer

        Args:
            n: Number of events to return
            event_type: Filter by event type (optional)

        Returns:
            List of event dictionaries, oldest first
        """
        events = list(self.event_buffer)

        if event_type:
            events = [e for e in events if e['event_type'] == event_type.value]

        return events[-n:]

    def get_session_metrics(self) -> Dict:
        """
        Get current session metrics

        Returns:
            Dictionary of aggregated metrics with result statistics
        """
        metrics = copy.deepcopy(self.session_metrics)
        results = metrics['measurements'].pop('results')

        if results:
            metrics['measurements']['avg_result_cm'] = float(np.mean(results))
            metrics['measurements']['min_result_cm'] = float(np.min(results))
            metrics['measurements']['max_result_cm'] = float(np.max(results))
        else:
            metrics['measurements']['avg_result_cm'] = None
            metrics['measurements']['min_result_cm'] = None
            metrics['measurements']['max_result_cm'] = None

        attempts = metrics['picks']['placed'] + metrics['picks']['missed']
        metrics['picks']['miss_rate'] = metrics['picks']['missed'] / attempts if attempts else 0.0

        return metrics

    def export_events(self, start_date: Optional[date] = None,
                      end_date: Optional[date] = None) -> List[Dict]:
        """
        Export buffered events within a date range

        Args:
            start_date: Start date (inclusive)
            end_date: End date (inclusive)

        Returns:
            List of event dictionaries
        """
        events = []
        for event in self.event_buffer:
            day = datetime.fromtimestamp(event['timestamp']).date()
            if start_date and day < start_date:
                continue
            if end_date and day > end_date:
                continue
            events.append(event)
        return events

    def clear_buffer(self) -> None:
        """Clear in-memory event buffer and session metrics"""
        self.event_buffer.clear()
        self.session_metrics = self._empty_metrics()

    def load_events_from_disk(self, max_events: Optional[int] = None) -> int:
        """
        Load the most recent events from log_directory into the buffer.

        Args:
            max_events: Maximum number of events to load (None for up to buffer_size)

        Returns:
            Number of events loaded
        """
        if not self.log_directory or not os.path.isdir(self.log_directory):
            return 0

        loaded = []
        for name in os.listdir(self.log_directory):
            if not name.endswith(".json"):
                continue
            filepath = os.path.join(self.log_directory, name)
            try:
                with open(filepath, 'r', encoding='utf-8') as f:
                    event = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning("Skipping unreadable event file %s: %s", name, e)
                continue

            if not isinstance(event, dict) or 'event_type' not in event or 'timestamp' not in event:
                continue
            loaded.append(event)

            # Avoid ID collisions with events logged after the load
            if isinstance(event.get('event_id'), int):
                self.event_counter = max(self.event_counter, event['event_id'])

        # Newest first, then keep the limit, then restore chronological order
        loaded.sort(key=lambda e: e['timestamp'], reverse=True)
        limit = min(max_events or self.buffer_size, self.buffer_size)
        loaded = sorted(loaded[:limit], key=lambda e: e['timestamp'])

        self.event_buffer.clear()
        self.event_buffer.extend(loaded)
        return len(loaded)
