"""
Requirements Test Generator API

FastAPI backend that turns business requirements into Gherkin test scenarios,
scores how well those scenarios cover each requirement's execution paths, and
pushes the results to Zephyr Scale.

Architecture Overview:
- Routes translate domain errors into HTTP responses
- Services hold the parsing, generation and coverage logic
- Repositories wrap the external AI and JIRA providers behind interfaces
- Dependency Injection container wires providers into routes

Key Features:
- Requirement extraction from documents and JIRA tickets using an OpenAI-compatible model
- Requirements table parsing with sequential ids (TG-001 or <TICKET>-001)
- Per-requirement Gherkin generation, run concurrently
- Coverage validation against the Paths value of each complexity annotation
- Zephyr Scale test case creation, one test case per scenario
- Structured logging with structlog

Usage:
1. Copy .env.example to .env and configure your API keys
2. Install dependencies: pip install -e ".[test]"
3. Run the application: python main.py
4. Access API docs at: http://localhost:8000/api/v1/docs

API Endpoints:
- POST /api/v1/requirements/parse - Parse a requirements table
- POST /api/v1/requirements/format - Render requirement records as a table
- POST /api/v1/requirements/extract - Extract a requirements table from a document
- POST /api/v1/coverage/validate - Score Gherkin content against a requirement
- POST /api/v1/test-cases/generate - Generate scenarios for every requirement
- POST /api/v1/test-cases/refine - Refine generated scenarios with feedback
- GET/DELETE /api/v1/test-cases/cache/{document_name} - Cached generation results
- GET /api/v1/integrations/jira/{ticket_key} - Fetch a JIRA ticket
- POST /api/v1/integrations/jira/import - Extract requirements from JIRA tickets
- POST /api/v1/integrations/zephyr/push - Push a feature to Zephyr Scale
- GET /api/v1/health - Health check

Coverage strategies:

   keyword (default)
       A requirement without a Paths annotation expects one path, or between
       2 and 5 paths when its text uses conditional language.

   word_count
       Expected paths grow by one per 20 words of requirement and acceptance
       criteria text, with a minimum of 2. Coverage is capped at 100%.

Select the strategy with COVERAGE_STRATEGY or per request on /coverage/validate.
"""
