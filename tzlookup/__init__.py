"""tzlookup: flat zone/offset lookup table built from IANA tzdata.

WHY: Consumers that only need "what is this zone's current UTC offset"
should not have to ship a full tz database. This package reduces a tzdata
release archive to one tab-separated line per zone.

HOW: Four-stage pipeline: extract (tar/gzip stream → region lines),
parse (lines → zone records), order (records → sorted table), write
(table → file). Each stage is independently testable.

RULES:
- Core stages never touch the network or the filesystem
- Faults surface as TzLookupError subclasses, never as process exits
- The CLI is the only place that maps errors to exit codes
"""

__version__ = "0.1.0"
