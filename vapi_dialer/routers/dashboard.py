# vapi_dialer/routers/dashboard.py
import html

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse

from vapi_dialer.config import Settings, get_settings

router = APIRouter(tags=["dashboard"])


_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{app_name}</title>
  <style>
    body {{ font-family: system-ui, sans-serif; max-width: 960px; margin: 2rem auto; color: #1f2937; }}
    label {{ display: block; font-weight: 600; margin: 1rem 0 .4rem; }}
    select, textarea, input[type=datetime-local] {{ width: 100%; padding: .5rem; }}
    textarea {{ height: 10rem; font-family: monospace; }}
    button {{ margin-top: 1rem; padding: .6rem 1.4rem; }}
    table {{ width: 100%; border-collapse: collapse; margin-top: 1rem; }}
    td, th {{ border-bottom: 1px solid #e5e7eb; padding: .4rem; text-align: left; }}
    .failed {{ color: #dc2626; }} .scheduled {{ color: #2563eb; }} .ok {{ color: #16a34a; }}
  </style>
</head>
<body>
  <h1>{app_name}</h1>
  <form id="call-form">
    <label for="assistant">Assistant</label>
    <select id="assistant" required><option value="">Loading assistants...</option></select>

    <label for="numbers">Phone numbers (one per line)</label>
    <textarea id="numbers" placeholder="+15551234567"></textarea>
    <small id="number-count">0 numbers</small>

    <label for="delay">Delay between calls: <span id="delay-label">{delay_s}</span>s</label>
    <input id="delay" type="range" min="0" max="10000" step="500" value="{delay_ms}">

    <label><input id="use-scheduling" type="checkbox"> Schedule calls at Vapi instead of waiting</label>
    <label for="schedule-from">Start at (optional, local time)</label>
    <input id="schedule-from" type="datetime-local">

    <button type="submit" id="submit">Start calling</button>
  </form>

  <section id="results" hidden>
    <h2>Results</h2>
    <p id="summary"></p>
    <table>
      <thead><tr><th>Number</th><th>Status</th><th>Call ID / Error</th><th>Scheduled for</th></tr></thead>
      <tbody id="rows"></tbody>
    </table>
  </section>

<script>
const $ = (id) => document.getElementById(id);

function parseNumbers() {{
  return $("numbers").value.split("\\n").map((n) => n.trim()).filter((n) => n.length > 0);
}}

async function loadAssistants() {{
  const resp = await fetch("/api/assistants");
  const data = await resp.json();
  const select = $("assistant");
  select.innerHTML = "";
  if (!data.success) {{
    select.innerHTML = '<option value="">Failed to load assistants</option>';
    return;
  }}
  select.appendChild(new Option("Select an assistant", ""));
  for (const a of data.assistants) {{
    select.appendChild(new Option(a.name || a.id, a.id));
  }}
}}

function renderResults(data) {{
  $("results").hidden = false;
  const rows = $("rows");
  rows.innerHTML = "";
  if (!data.success) {{
    $("summary").textContent = "Error: " + data.error;
    return;
  }}
  let summary = `Total: ${{data.totalCalls}}, successful: ${{data.successfulCalls}}, failed: ${{data.failedCalls}}`;
  if (data.scheduledCalls !== undefined) summary += `, scheduled: ${{data.scheduledCalls}}`;
  $("summary").textContent = summary;
  for (const r of data.results) {{
    const tr = document.createElement("tr");
    const cls = r.error ? "failed" : (r.status === "scheduled" ? "scheduled" : "ok");
    const cells = [r.number, r.status || "", r.callId || r.error || "",
                   r.scheduledAt ? new Date(r.scheduledAt).toLocaleString() : ""];
    for (const value of cells) {{
      const td = document.createElement("td");
      td.textContent = value;
      tr.appendChild(td);
    }}
    tr.className = cls;
    rows.appendChild(tr);
  }}
}}

$("numbers").addEventListener("input", () => {{
  $("number-count").textContent = parseNumbers().length + " numbers";
}});
$("delay").addEventListener("input", (e) => {{
  $("delay-label").textContent = Number(e.target.value) / 1000;
}});

$("call-form").addEventListener("submit", async (e) => {{
  e.preventDefault();
  const numbers = parseNumbers();
  if (!$("assistant").value || numbers.length === 0) {{
    alert("Pick an assistant and enter at least one phone number.");
    return;
  }}
  const body = {{
    assistantId: $("assistant").value,
    phoneNumbers: numbers,
    delay: Number($("delay").value),
    useScheduling: $("use-scheduling").checked,
  }};
  if ($("schedule-from").value) body.scheduleFrom = new Date($("schedule-from").value).toISOString();
  $("submit").disabled = true;
  $("submit").textContent = "Calling...";
  try {{
    const resp = await fetch("/api/make-calls", {{
      method: "POST",
      headers: {{ "Content-Type": "application/json" }},
      body: JSON.stringify(body),
    }});
    renderResults(await resp.json());
  }} catch (err) {{
    renderResults({{ success: false, error: "Request failed: " + err.message }});
  }} finally {{
    $("submit").disabled = false;
    $("submit").textContent = "Start calling";
  }}
}});

loadAssistants();
</script>
</body>
</html>
"""


@router.get("/", response_class=HTMLResponse)
def dashboard(settings: Settings = Depends(get_settings)):
    """
    Operator page: pick an assistant, paste numbers, start calling.
    All data comes from /api/assistants and /api/make-calls.
    """
    delay_ms = settings.DEFAULT_CALL_DELAY_MS
    return HTMLResponse(
        _PAGE.format(
            app_name=html.escape(settings.APP_NAME),
            delay_ms=delay_ms,
            delay_s=delay_ms / 1000,
        )
    )
