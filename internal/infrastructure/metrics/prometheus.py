"""
Prometheus Metrics for the product DAO.

Defines metrics for monitoring repository statements.
"""

from prometheus_client import Counter, Histogram, Gauge

# Metrics for the database layer
DB_CONNECTIONS_ACTIVE = Gauge(
    'product_dao_db_connections_active',
    'Connections currently held by repository operations'
)

DB_QUERY_DURATION = Histogram(
    'product_dao_db_query_duration_seconds',
    'Repository statement duration',
    ['operation'],  # save, find_all, find_by_id, update, remove
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0]
)

DB_QUERY_ERRORS = Counter(
    'product_dao_db_query_errors_total',
    'Repository statements that failed with a storage error',
    ['operation']
)
