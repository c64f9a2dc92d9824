# autolineweight/core/diagnostics.py

def _exc_to_str(e):
    try:
        return str(e)
    except Exception:
        return "<unstringifiable exception>"


class Diagnostics(object):
    """
    Structured diagnostics recorder for a single run.

    - Bounded event storage
    - Aggregated counts (keep counting after the event cap)
    - JSON-safe output
    - No logging module: runs inside Rhino's script host unchanged
    """

    def __init__(self, max_events=200):
        self.max_events = int(max_events)

        self.events = []
        self.counts = {}
        self.dropped_events = 0

        # dedupe_key -> {index: int|None, suppressed: int}
        self._dedupe = {}

    def _count_key(self, level, phase, callsite, exc_type):
        return "{}|{}|{}|{}".format(level, phase, callsite, exc_type or "")

    def _record(self, payload):
        key = self._count_key(
            payload.get("level"),
            payload.get("phase"),
            payload.get("callsite"),
            payload.get("exc_type"),
        )
        self.counts[key] = self.counts.get(key, 0) + 1

        if len(self.events) >= self.max_events:
            self.dropped_events += 1
            return None

        self.events.append(payload)
        return len(self.events) - 1

    def _payload(self, level, phase, callsite, message, exc=None, segment_index=None,
                 source_id=None, extra=None):
        return {
            "level": level,
            "phase": phase,
            "callsite": callsite,
            "message": message,
            "exc_type": type(exc).__name__ if exc is not None else None,
            "exc_message": _exc_to_str(exc) if exc is not None else None,
            "segment_index": segment_index,
            "source_id": None if source_id is None else str(source_id),
            "extra": extra or {},
        }

    def debug(self, phase, callsite, message, segment_index=None, source_id=None, extra=None):
        self._record(self._payload("DEBUG", phase, callsite, message,
                                   segment_index=segment_index, source_id=source_id, extra=extra))

    def info(self, phase, callsite, message, segment_index=None, source_id=None, extra=None):
        self._record(self._payload("INFO", phase, callsite, message,
                                   segment_index=segment_index, source_id=source_id, extra=extra))

    def warn(self, phase, callsite, message, segment_index=None, source_id=None, extra=None):
        self._record(self._payload("WARN", phase, callsite, message,
                                   segment_index=segment_index, source_id=source_id, extra=extra))

    def error(self, phase, callsite, message, exc=None, segment_index=None, source_id=None, extra=None):
        self._record(self._payload("ERROR", phase, callsite, message, exc=exc,
                                   segment_index=segment_index, source_id=source_id, extra=extra))

    def debug_dedupe(self, dedupe_key, phase, callsite, message, segment_index=None,
                     source_id=None, extra=None):
        """Record at most one DEBUG event per dedupe_key.

        Later calls bump extra.suppressed_count on the first event instead of
        recording again. Used for per-segment paths that would otherwise spam.
        """
        entry = self._dedupe.get(dedupe_key)
        if entry is None:
            payload_extra = dict(extra or {})
            payload_extra.setdefault("suppressed_count", 0)
            idx = self._record(self._payload("DEBUG", phase, callsite, message,
                                             segment_index=segment_index, source_id=source_id,
                                             extra=payload_extra))
            self._dedupe[dedupe_key] = {"index": idx, "suppressed": 0}
            return

        entry["suppressed"] += 1
        idx = entry.get("index")
        if idx is not None and 0 <= idx < len(self.events):
            try:
                ev_extra = self.events[idx].get("extra")
                if isinstance(ev_extra, dict):
                    ev_extra["suppressed_count"] = entry["suppressed"]
            except Exception:
                # Diagnostics must never throw.
                pass

    def count(self, level=None, phase=None):
        """Total recorded calls (including dropped) matching level/phase."""
        total = 0
        for key, n in self.counts.items():
            lvl, ph, _cs, _exc = key.split("|", 3)
            if level is not None and lvl != level:
                continue
            if phase is not None and ph != phase:
                continue
            total += n
        return total

    def to_dict(self):
        return {
            "max_events": self.max_events,
            "num_events": len(self.events),
            "dropped_events": self.dropped_events,
            "counts": dict(self.counts),
            "events": list(self.events),
        }
