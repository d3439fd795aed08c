# dalfox

Building blocks for an XSS scanning service:

- **WAF fingerprinting**: `dalfox.waf.check_waf(headers, body)` checks a
  response's headers and body against a table of known web application
  firewall signatures (`dalfox.waf.PATTERNS`, a tuple of `WAFPattern`). It
  returns `(True, name)` for the first signature that matches and
  `(False, "")` when none does.
- **HTTP transports**: `dalfox.transport.create_default_transport(timeout_seconds)`
  returns a `DefaultTransport`, a `requests` adapter that skips certificate
  checks, sends `Connection: close` and applies a connect timeout and an
  optional proxy. `dalfox.transport.get_transport(options)` returns
  `options.custom_transport` if one is set, or a default transport otherwise.
  A proxy from `options.proxy_address` is applied only to a `DefaultTransport`.
  An invalid proxy address is logged and ignored.
- **Data types**: `dalfox.models` holds `Options`, `PoC` (one finding),
  `Scan`, `ScanRequest`, `ScanResponse` and `ScanList`.
- **Scan bookkeeping**: `dalfox.scanstore` looks up scans by ID (`get_scan`,
  `get_scans`), makes random scan IDs (`new_scan_id`), strips CR/LF from URLs
  (`clean_url`) and runs a scanner for a request (`scan_from_api`).
- **REST API**: `dalfox.server.create_app(options, scans, scanner)` returns a
  Flask application. `dalfox.server.run_api_server(options, scanner)` serves
  it.
- **API description**: `dalfox.docs.read_doc(info=None)` returns the Swagger 2.0
  document of the API as JSON text. You can change it through a `SwaggerInfo`.
- **Stdio tool server**: `dalfox.mcp.McpServer` answers newline-delimited
  JSON-RPC messages. It offers the tools `scan_with_dalfox` and
  `get_results_dalfox`.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install ".[test]"
pytest
```

## Checking a response for a WAF

```python
from dalfox.waf import check_waf

matched, name = check_waf({"cf-ray": ["abc"]}, "Attention Required!")
# matched == True
# name == "CloudFlare Web Application Firewall (CloudFlare)"
```

`headers` maps each header name to a single value or to a list of values. A
signature matches when its expression is found in the body, in a header name
or in a header value.

## Scanners

The service does not scan by itself. A scanner is any callable
`scanner(url, options, sid)` that returns an iterable of `dalfox.models.PoC`.
`scan_from_api` calls it and stores the findings as a `Scan` under `sid` in
`options.scan`. Until then the scan counts as still running. If the scanner
raises, the error is logged and nothing is stored.

```python
from dalfox.models import Options, PoC
from dalfox.server import create_app

def scanner(url, options, sid):
    return [PoC(type="V", param="q", payload="<svg onload=alert(1)>")]

app = create_app(Options(), [], scanner)
```

## Running the API server

```
dalfox-server --host 127.0.0.1 --port 6664
```

| Option      | Default   | Meaning                          |
|-------------|-----------|----------------------------------|
| `--host`    | `0.0.0.0` | address to listen on             |
| `--port`    | `6664`    | port to listen on                |
| `--timeout` | `10`      | request timeout in seconds       |
| `--proxy`   | (none)    | proxy for outgoing requests      |
| `--debug`   | off       | log debug messages               |

Endpoints:

| Method | Path                 | Description |
|--------|----------------------|-------------|
| GET    | `/health`            | Returns `{"code": 200, "msg": "ok", "data": null}` |
| POST   | `/scan`              | Starts a scan in the background. Body: `{"url": ..., "options": {...}}`. The scan ID comes back in `msg`. A body that cannot be read gives status 500 with `"Parameter Bind error"` |
| GET    | `/scan/<sid>`        | `msg` is `"scanning"` while the scan runs. It becomes `"finish"` once the findings are in `data`. An unknown ID gives 404 with `"Not found scanid"` |
| GET    | `/scans`             | Lists the scan IDs started on this server |
| GET    | `/swagger/doc.json`  | The Swagger document from `read_doc()` |

`/scans` answers with HTTP status 404 even though it returns the list in the
body. Read the list from the body and do not rely on the status code.

The `options` object of a scan request takes these keys: `header`, `cookie`,
`data`, `proxy`, `timeout`, `worker`, `delay`, `follow-redirects`,
`mining-dict`, `mining-dom`, `deep-domxss`, `skip-discovery`,
`output-request`, `output-response`, `method` and `debug`. Unknown keys and
nulls are ignored. A value of the wrong type is rejected.

Each response is also written to the `dalfox.server.access` logger as one JSON
line.

## The stdio tool server

```python
import sys
from dalfox.mcp import McpServer
from dalfox.models import Options

McpServer(Options(), scanner).serve(sys.stdin, sys.stdout)
```

`parse_scan_arguments(arguments)` turns the arguments of `scan_with_dalfox`
into a URL and `Options`. `format_results(scan)` renders a finished scan as
the text that `get_results_dalfox` returns. Pass `background=False` to run
scans in the calling thread.

## What this package does not do

- It has no XSS scanning engine. The scanner that `dalfox-server` starts sends
  one request to the target and logs any firewall it detects. It reports no
  findings, so every scan started through that command finishes with an empty
  result list. For real findings, give `create_app`, `run_api_server` or
  `McpServer` your own scanner.
- It has no command that starts the stdio tool server. Start `McpServer.serve`
  from your own code as shown above.
- Scans are kept in memory only and are lost when the process exits.
- The API serves the Swagger document only as JSON; there is no Swagger UI.