# vaulty

Building blocks for keeping secrets away from coding agents while still
letting them do useful work. The package is a library; it has no command of
its own. It covers:

- **Framework formats** – `.env` files (`vaulty.dotenv`), Docker Compose
  environment sections and Docker secret files (`vaulty.docker`), Kubernetes
  `Secret` manifests (`vaulty.k8s`), Next.js public/private classification
  (`vaulty.nextjs`) and Rails encrypted credentials (`vaulty.rails`).
- **Secret backends** – AWS Secrets Manager, GCP Secret Manager, HashiCorp
  Vault and 1Password, each driven through its own command-line tool, with a
  time-limited cache in front (`vaulty.backend`).
- **Audit logging** – an append-only JSON-lines log of proxy calls, command
  executions, denials and approvals (`vaulty.audit`).
- **Daemon support** – the request/response protocol, a client for a running
  daemon over a Unix socket or localhost HTTP, desktop notifications for
  denied requests, and PID-file and process helpers (`vaulty.daemon`).
- **Command execution** – run a shell command with secrets added to its
  environment and its output passed through a redaction function
  (`vaulty.executor`).

## Working with `.env` files

```python
import io
import sys

from vaulty.dotenv import parse_dotenv, write_dotenv

text = io.StringIO('export API_KEY="placeholder"\nDEBUG=1 # inline comment\n')
secrets = parse_dotenv(text)
# {'API_KEY': 'placeholder', 'DEBUG': '1'}

write_dotenv(sys.stdout, secrets, reveal=False)
# API_KEY=****
# DEBUG=****
```

Single-quoted values are taken literally; double-quoted values understand
`\n`, `\\` and `\"`. Unquoted values lose a trailing ` #` comment. A line
without `=`, with an empty key or with an unterminated quote raises
`DotenvError` naming the line number. `write_dotenv` writes keys in sorted
order and masks values as `****` unless `reveal` is true.

## Kubernetes and Docker Compose

```python
import sys

from vaulty.docker import parse_compose_env, write_compose_override, write_secret_files
from vaulty.k8s import parse_k8s_secret, write_k8s_secret

secrets = {"API_KEY": "placeholder"}

write_k8s_secret(sys.stdout, "app-secrets", "default", secrets)
write_compose_override(sys.stdout, secrets, "web")
```

`write_k8s_secret` produces an `Opaque` Secret with base64-encoded values;
the `namespace` line is left out when the namespace is empty.
`parse_k8s_secret` base64-decodes the `data` section of a manifest and raises
`K8sSecretError` for anything that is not `kind: Secret` or for bad base64.

`write_compose_override` writes a `docker-compose.override.yml` with the
secrets, sorted and double-quoted, under `services.<name>.environment`.
`parse_compose_env` collects environment variables from every service, in
both mapping form (`KEY: value`) and list form (`- KEY=value`), raising
`ComposeError` on malformed YAML. `write_secret_files(directory, secrets)`
writes each secret as its own file with mode `0600`, the layout Docker
secrets expect.

## Next.js

```python
from vaulty.nextjs import classify_nextjs_env, is_public_env_var

public, private = classify_nextjs_env(
    {"NEXT_PUBLIC_SITE_NAME": "My Site", "SECRET_KEY": "placeholder"}
)
is_public_env_var("NEXT_PUBLIC_API_URL")  # True
```

Anything prefixed `NEXT_PUBLIC_` ends up in the browser bundle, so it is
reported as public.

## Rails credentials

- `decrypt_rails_credentials(enc_path, key_path)` reads a
  `credentials.yml.enc` file and its hex master key (32 bytes) and decrypts
  it with AES-256-GCM; `decrypt_rails_payload(payload, key)` does the same
  for a `base64(data)--base64(iv)--base64(tag)` string already in memory.
- `parse_rails_credentials(data)` flattens the nested YAML into
  `SECTION_KEY` names (`aws.access_key_id` becomes `AWS_ACCESS_KEY_ID`);
  `flatten_yaml(prefix, mapping)` is the flattening step on its own.
- `write_rails_credentials(secrets)` returns nested YAML text, splitting each
  name at its first underscore: `AWS_ACCESS_KEY_ID` becomes
  `aws: {access_key_id: ...}`.

Failures raise `RailsCredentialsError`.

## Cloud backends

```python
from vaulty.backend.factory import BackendConfig, new_backend

backend = new_backend(BackendConfig(type="aws-secrets-manager", region="eu-west-1", ttl="30s"))
names = backend.list()
value = backend.get(names[0])
```

`new_backend` accepts the types `aws-secrets-manager`, `gcp-secret-manager`,
`hashicorp-vault` and `1password`, checks that the matching tool (`aws`,
`gcloud`, `vault`, `op`) is on `PATH`, and returns the backend wrapped in a
`CachedBackend`. The cache keeps values for five minutes by default, or for
the configured TTL in forms such as `"30s"`, `"1h30m"` or `"1.5s"`
(`parse_duration`). Listings are never cached; `CachedBackend.zero()` drops
every cached value. Every failure raises `BackendError`.

The backend classes (`AWSBackend`, `GCPBackend`, `HashiCorpBackend`,
`OnePasswordBackend`) can also be built directly; their `cmd_args_*`
methods return the exact arguments passed to each tool.

## Audit log

```python
from vaulty.audit import AuditLogger

with AuditLogger("~/.config/vaulty/audit.log") as log:
    log.log_proxy("API_KEY", "GET", "https://api.example.com", 200)
    log.log_exec("DB_URL", "make migrate", 0)
    log.log_denied("API_KEY", "https://evil.example.com", "domain not in allowlist")
```

Each call appends one JSON object with a UTC timestamp (`ts`), the action,
the secret name and the fields that apply; empty fields are left out. A
leading `~/` in the path is expanded, the directory is created if needed and
the file is opened in append mode with mode `0600`.

## Daemon support

```python
from vaulty.daemon.client import new_client
from vaulty.daemon.protocol import Request

client = new_client("/tmp/vaulty.sock", 19876)
response = client.send(Request(action="list"))
```

`new_client(socket_path, http_port)` uses the Unix socket when it accepts a
connection and otherwise `http://127.0.0.1:<port>`. `DaemonClient.send`
posts the request to `/v1/request` and returns the decoded `Response`; an
unreachable daemon or a reply that is not a JSON object raises
`DaemonError`.

`Notifier(enabled).notify_denied(...)` sends a critical desktop notification
through `notify-send`, and silently does nothing when disabled or when the
tool is missing; `format_body` gives its text:

```python
from vaulty.daemon.notify import format_body

print(format_body("API_KEY", "https://evil.example.com", "domain not in allowlist"))
# Secret: API_KEY
# Target: https://evil.example.com
# Reason: domain not in allowlist
```

`vaulty.daemon.process` offers `pid_file_path()`
(`~/.config/vaulty/vaulty.pid`), `socket_path()` (`/tmp/vaulty.sock`),
`write_pid(path)`, `is_process_alive(pid)` and `stop_process(pid)`.

## Running commands

```python
from vaulty.executor import run

result = run("echo $API_KEY", {"API_KEY": "placeholder"}, redact=lambda s: s.replace("placeholder", "****"))
# ExecResult(exit_code=0, stdout='****\n', stderr='')
```

The command runs under `sh -c` (`cmd /C` on Windows). A non-zero exit is
reported in `exit_code`; a command that cannot be started raises
`ExecutionError`.

## What the package does not do

There is no encrypted vault storage, no policy configuration, no daemon
server that answers requests, no HTTP proxy that injects secrets, and no
command-line program. The pieces here are the formats, backends, audit log,
client, notification, process and execution helpers that such a program
would be built from.

## Tests

The test suite uses pytest; install the `test` extra to get it.