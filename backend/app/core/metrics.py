"""
Prometheus metrics configuration
"""
import os

from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Histogram,
                               generate_latest)
from prometheus_client.multiprocess import MultiProcessCollector
from prometheus_client.registry import REGISTRY, CollectorRegistry

# Check if we're in multiprocess mode
if os.environ.get('PROMETHEUS_MULTIPROC_DIR'):
    _registry = CollectorRegistry()
    MultiProcessCollector(_registry)
else:
    _registry = REGISTRY

# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation', 'table']
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation', 'table'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

db_errors_total = Counter(
    'db_errors_total',
    'Total number of database errors surfaced by services',
    ['error_type']
)

# ============================================================================
# Domain Metrics
# ============================================================================

workspace_operations_total = Counter(
    'workspace_operations_total',
    'Total number of workspace operations',
    ['operation', 'status']  # status: 'success' or the error class name
)

form_submissions_total = Counter(
    'form_submissions_total',
    'Total number of public form submissions',
    ['status']  # status: 'accepted', 'prevented', 'invalid'
)

# ============================================================================
# Vendor Metrics
# ============================================================================

sms_updates_total = Counter(
    'vendor_twilio_sms_update_total',
    'SMS delivery status updates received from Twilio',
    ['accountsid', 'smsstatus', 'errorcode']
)


def get_metrics():
    """Render all metrics in Prometheus text format"""
    return generate_latest(_registry)


def get_metrics_content_type():
    return CONTENT_TYPE_LATEST
