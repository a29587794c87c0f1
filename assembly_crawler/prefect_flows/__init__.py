"""
Prefect flows for the Assembly crawler.

This package contains flow definitions for:
- Scheduled bill and petition crawls
- The end-of-notice status sweep
- Crawl run monitoring

Responsibility: Define orchestration workflows using Prefect
"""
