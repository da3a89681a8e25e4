import hmac
import json
import os
import secrets
import time
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, request, jsonify, session
from google import genai
from google.genai import errors, types

from system_prompt import META_PROMPT, MODEL_LABELS, PROMPT_KEYS, USER_PROMPT_TEMPLATE, build_user_prompt
from usage_tracker import UsageTracker, get_pricing

load_dotenv()

APP_VERSION = "0.1.0"

GENERATION_MODEL = os.environ.get("GEMINI_MODEL", "gemini-2.5-pro")
MAX_OUTPUT_TOKENS = 8192
REQUEST_TIMEOUT_MS = 120_000

AUTH_COOKIE_NAME = "promptos_auth"
AUTH_COOKIE_LIFETIME = timedelta(days=7)

app = Flask(__name__)
app.config.update(
    SECRET_KEY=os.environ.get("SECRET_KEY") or secrets.token_hex(16),
    SESSION_COOKIE_NAME=AUTH_COOKIE_NAME,
    SESSION_COOKIE_HTTPONLY=True,
    SESSION_COOKIE_SAMESITE="Strict",
    SESSION_COOKIE_SECURE=os.environ.get("SESSION_COOKIE_SECURE", "").lower() in ("1", "true", "yes"),
    PERMANENT_SESSION_LIFETIME=AUTH_COOKIE_LIFETIME,
)

usage_tracker = UsageTracker(get_pricing(GENERATION_MODEL))


def get_client():
    """Build an LLM client from the environment, or None when no key is set."""
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        return None
    return genai.Client(
        api_key=api_key,
        http_options=types.HttpOptions(timeout=REQUEST_TIMEOUT_MS),
    )


def build_config():
    return types.GenerateContentConfig(
        system_instruction=META_PROMPT,
        max_output_tokens=MAX_OUTPUT_TOKENS,
    )


def first_text_block(response):
    """Return the text of the first non-thought text part of the first candidate."""
    if not response.candidates:
        return None
    content = response.candidates[0].content
    if content is None or not content.parts:
        return None
    for part in content.parts:
        if part.text and not part.thought:
            return part.text
    return None


def strip_code_fences(text):
    """Remove an optional ``` / ```json fence from both ends of a model reply."""
    content = text.strip()
    if content.startswith("```json"):
        content = content[7:]
    elif content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    return content.strip()


def parse_prompt_set(text):
    """Parse a model reply into the four prompts.

    Raises ValueError (json.JSONDecodeError included) when the reply is not a
    JSON object carrying every prompt as a string.
    """
    try:
        payload = json.loads(strip_code_fences(text))
    except RecursionError as e:
        raise ValueError("Model reply is nested too deeply") from e
    if not isinstance(payload, dict):
        raise ValueError("Model reply is not a JSON object")

    missing = [key for key in PROMPT_KEYS if not isinstance(payload.get(key), str)]
    if missing:
        raise ValueError(f"Model reply is missing prompts: {', '.join(missing)}")

    return {key: payload[key] for key in PROMPT_KEYS}


def extract_usage(response):
    meta = response.usage_metadata
    if meta is None:
        return 0, 0
    input_tokens = meta.prompt_token_count or 0
    # Thinking tokens are billed at the output rate
    output_tokens = (meta.candidates_token_count or 0) + (meta.thoughts_token_count or 0)
    return input_tokens, output_tokens


def track_usage(input_tokens, output_tokens):
    # Fire and forget: a tracking failure never fails the request
    try:
        usage_tracker.record(input_tokens, output_tokens)
    except ValueError:
        app.logger.warning("Failed to track usage", exc_info=True)


# ── Auth gate ──

def access_passwords():
    candidates = (
        os.environ.get("ACCESS_PASSWORD"),
        os.environ.get("SECONDARY_ACCESS_PASSWORD"),
    )
    return [p for p in candidates if p]


def auth_enabled():
    return bool(os.environ.get("ACCESS_PASSWORD"))


def password_matches(candidate):
    if not isinstance(candidate, str):
        return False
    given = candidate.encode("utf-8")
    matched = False
    for expected in access_passwords():
        matched |= hmac.compare_digest(given, expected.encode("utf-8"))
    return matched


def is_authenticated():
    if not auth_enabled():
        return True
    return session.get("authenticated") is True


@app.before_request
def require_auth():
    path = request.path
    if not path.startswith("/api/") or path.startswith("/api/auth"):
        return None
    if is_authenticated():
        return None
    return jsonify({"error": "Unauthorized"}), 401


@app.route("/api/auth", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"success": False, "error": "Invalid request"}), 400

    if not auth_enabled():
        return jsonify({"success": True})

    if not password_matches(data.get("password")):
        app.logger.warning("Rejected login attempt from %s", request.remote_addr)
        return jsonify({"success": False, "error": "Invalid password"}), 401

    session.clear()
    session.permanent = True
    session["authenticated"] = True
    return jsonify({"success": True})


@app.route("/api/auth/check")
def auth_check():
    if is_authenticated():
        return jsonify({"authenticated": True})
    return jsonify({"authenticated": False}), 401


# ── Generation ──

@app.route("/api/generate", methods=["POST"])
def generate():
    data = request.get_json(silent=True)
    intent = data.get("intent") if isinstance(data, dict) else None

    if not isinstance(intent, str) or not intent.strip():
        return jsonify({"error": "Intent is required"}), 400
    intent = intent.strip()

    client = get_client()
    if client is None:
        app.logger.error("GEMINI_API_KEY is not set")
        return jsonify({"error": "LLM API key not configured"}), 500

    try:
        start = time.time()
        response = client.models.generate_content(
            model=GENERATION_MODEL,
            contents=build_user_prompt(intent),
            config=build_config(),
        )
        elapsed = round(time.time() - start, 1)

        content = first_text_block(response)
        if not content:
            app.logger.error("LLM response had no text content")
            return jsonify({"error": "No content in response"}), 500

        try:
            prompts = parse_prompt_set(content)
        except ValueError:
            app.logger.error("Failed to parse model response: %s", content)
            return jsonify({"error": "Failed to parse generated prompts"}), 500

        input_tokens, output_tokens = extract_usage(response)
        track_usage(input_tokens, output_tokens)

        return jsonify({
            "prompts": prompts,
            "usage": {"input_tokens": input_tokens, "output_tokens": output_tokens},
            "elapsed": elapsed,
        })
    except errors.APIError as e:
        app.logger.error("LLM API error %s: %s", e.code, e.message)
        return jsonify({"error": "Failed to generate prompts"}), 500
    except Exception:
        app.logger.exception("Prompt generation failed")
        return jsonify({"error": "Internal server error"}), 500


# ── Usage ──

@app.route("/api/usage", methods=["GET"])
def usage():
    return jsonify(usage_tracker.snapshot())


@app.route("/api/usage", methods=["POST"])
def record_usage():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Failed to track usage"}), 400

    try:
        usage_tracker.record(data.get("input_tokens"), data.get("output_tokens"))
    except ValueError:
        return jsonify({"error": "Failed to track usage"}), 400
    return jsonify({"success": True})


# ── Pages ──

def render_page(page):
    return page.replace(
        "/*__MODEL_LABELS__*/", json.dumps(MODEL_LABELS),
    ).replace(
        "/*__PROMPT_KEYS__*/", json.dumps(list(PROMPT_KEYS)),
    ).replace(
        "/*__APP_VERSION__*/", json.dumps(APP_VERSION),
    )


@app.route("/")
def index():
    return render_page(HTML_PAGE)


@app.route("/desktop")
def desktop():
    pricing = usage_tracker.pricing
    return render_page(DESKTOP_PAGE).replace(
        "/*__META_PROMPT__*/", json.dumps(META_PROMPT),
    ).replace(
        "/*__USER_PROMPT_TEMPLATE__*/", json.dumps(USER_PROMPT_TEMPLATE),
    ).replace(
        "/*__MODEL__*/", json.dumps(GENERATION_MODEL),
    ).replace(
        "/*__MAX_OUTPUT_TOKENS__*/", json.dumps(MAX_OUTPUT_TOKENS),
    ).replace(
        "/*__PRICING__*/", json.dumps({
            "label": pricing.label,
            "inputPer1M": float(pricing.input_per_1m),
            "outputPer1M": float(pricing.output_per_1m),
        }),
    )


@app.route("/ping")
def ping():
    return jsonify({"status": "ok", "version": APP_VERSION})


HTML_PAGE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>PromptOS</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: linear-gradient(to bottom, #09090b, #18181b 50%, #09090b);
    color: #e0e0e0;
    min-height: 100vh;
  }

  .page {
    max-width: 1100px;
    margin: 0 auto;
    padding: 32px 24px 120px;
    display: flex;
    flex-direction: column;
    gap: 20px;
  }

  .page-header {
    display: flex;
    align-items: baseline;
    gap: 12px;
  }
  .page-header h1 { font-size: 1.6rem; font-weight: 700; color: #fff; }
  .page-header p { font-size: 0.85rem; color: #888; }
  .page-header a {
    margin-left: auto;
    font-size: 0.75rem;
    color: #888;
    text-decoration: none;
    transition: color 0.15s;
  }
  .page-header a:hover { color: #8b5cf6; }

  .hidden { display: none !important; }

  /* ── Login ── */

  .login-card {
    max-width: 420px;
    margin: 12vh auto 0;
    background: #18181b;
    border: 1px solid #2a2a2a;
    border-radius: 16px;
    padding: 28px;
    display: flex;
    flex-direction: column;
    gap: 14px;
  }
  .login-card h2 { font-size: 1.1rem; color: #fff; }
  .login-card p { font-size: 0.82rem; color: #888; }

  input[type="password"] {
    width: 100%;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 12px 14px;
    font-size: 0.95rem;
    outline: none;
    transition: border-color 0.2s;
  }
  input[type="password"]:focus { border-color: #8b5cf6; }

  .form-error { font-size: 0.8rem; color: #fca5a5; min-height: 1.2em; }

  /* ── Intent form ── */

  .input-area { position: relative; }

  textarea {
    width: 100%;
    min-height: 140px;
    background: #1a1a1a;
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 14px;
    padding-bottom: 46px;
    font-size: 0.95rem;
    font-family: inherit;
    resize: vertical;
    outline: none;
    transition: border-color 0.2s;
    line-height: 1.5;
  }
  textarea:focus { border-color: #8b5cf6; }
  textarea::placeholder { color: #555; }

  .input-footer {
    position: absolute;
    bottom: 15px;
    right: 13px;
    display: flex;
    gap: 8px;
    align-items: center;
  }

  .input-hint { font-size: 0.7rem; color: #555; margin-right: 4px; }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 8px 20px;
    font-size: 0.82rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }

  button.secondary {
    background: #232323;
    color: #aaa;
    border: 1px solid #333;
  }
  button.secondary:hover { background: #2e2e2e; color: #e0e0e0; }

  .status {
    font-size: 0.78rem;
    color: #888;
    min-height: 1.2em;
  }
  .status .timer { color: #8b5cf6; font-variant-numeric: tabular-nums; }

  .error-card {
    border: 1px solid #ef4444;
    color: #fca5a5;
    background: #1a1111;
    border-radius: 10px;
    padding: 14px 16px;
    font-size: 0.88rem;
  }

  .loading {
    display: flex;
    align-items: center;
    gap: 10px;
    color: #888;
    font-size: 0.88rem;
  }
  .spinner {
    width: 16px; height: 16px;
    border: 2px solid #333;
    border-top-color: #8b5cf6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  /* ── Result cards ── */

  .results-toolbar {
    display: flex;
    justify-content: flex-end;
    gap: 8px;
  }

  .cards {
    display: grid;
    grid-template-columns: repeat(2, minmax(0, 1fr));
    gap: 16px;
  }
  .cards.has-expanded { grid-template-columns: minmax(0, 1fr); }
  @media (max-width: 760px) { .cards { grid-template-columns: minmax(0, 1fr); } }

  .prompt-card {
    background: #141416;
    border: 2px solid #2a2a2a;
    border-radius: 14px;
    padding: 16px;
    display: flex;
    flex-direction: column;
    gap: 12px;
    cursor: pointer;
    transition: transform 0.2s;
  }
  .prompt-card:hover { transform: scale(1.01); }
  .prompt-card.expanded:hover { transform: none; }
  .cards.has-expanded .prompt-card:not(.expanded) { display: none; }

  .card-header {
    display: flex;
    align-items: center;
    gap: 8px;
  }
  .card-name { font-weight: 700; font-size: 1.1rem; }
  .card-company { font-size: 0.72rem; color: #888; }
  .card-header button { margin-left: auto; }
  .card-header button.copied { background: #14532d; color: #4ade80; border-color: #22c55e; }

  .format-info {
    background: rgba(0,0,0,0.3);
    border: 1px solid #333;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.78rem;
    color: #a1a1aa;
    line-height: 1.5;
  }
  .format-info strong { color: #fff; font-family: 'SF Mono', 'Fira Code', monospace; font-weight: 500; }

  .prompt-text {
    margin: 0;
    padding: 12px;
    background: rgba(0,0,0,0.25);
    border-radius: 8px;
    font-family: 'SF Mono', 'Fira Code', 'Cascadia Code', monospace;
    font-size: 0.8rem;
    line-height: 1.55;
    color: #e4e4e7;
    white-space: pre-wrap;
    word-break: break-word;
    max-height: 16rem;
    overflow-y: auto;
  }
  .prompt-card.expanded .prompt-text { max-height: 60vh; }

  .collapse-hint { display: none; font-size: 0.72rem; color: #666; text-align: center; }
  .prompt-card.expanded .collapse-hint { display: block; }

  /* ── Usage ── */

  .usage-bar {
    position: fixed;
    bottom: 20px;
    left: 50%;
    transform: translateX(-50%);
    background: #1a1a1a;
    border: 1px solid #333;
    border-radius: 12px;
    padding: 8px 18px;
    display: flex;
    flex-direction: column;
    align-items: center;
    gap: 2px;
    font-size: 0.74rem;
    color: #888;
    box-shadow: 0 4px 24px rgba(0,0,0,0.5);
  }
  .usage-bar .row { display: flex; gap: 12px; align-items: center; }
  .usage-bar .value { font-family: 'SF Mono', monospace; font-weight: 600; font-variant-numeric: tabular-nums; }
  .usage-bar .cost { color: #fb923c; }
  .usage-bar .tokens { color: #60a5fa; }
  .usage-bar .requests { color: #4ade80; }
  .usage-bar .sep { color: #444; }
  .usage-bar .note { font-size: 0.64rem; color: #555; }

  .footer { text-align: center; font-size: 0.7rem; color: #555; }
</style>
</head>
<body>

<div class="page">
  <div class="page-header">
    <h1>PromptOS</h1>
    <p>One intent, four model-native prompts.</p>
    <a href="/desktop">Desktop mode &#8594;</a>
  </div>

  <div id="checking" class="loading"><div class="spinner"></div>Checking access...</div>

  <!-- ── Login ── -->
  <form id="loginView" class="login-card hidden" onsubmit="login(event)">
    <h2>Access required</h2>
    <p>Enter the access password to continue.</p>
    <input id="password" type="password" placeholder="Password" autocomplete="current-password">
    <div id="loginError" class="form-error"></div>
    <button id="loginBtn" type="submit">Unlock</button>
  </form>

  <!-- ── App ── -->
  <div id="appView" class="hidden" style="display:flex;flex-direction:column;gap:20px">
    <div class="input-area">
      <textarea id="intent" placeholder="Describe what you want the prompt to do..."></textarea>
      <div class="input-footer">
        <span class="input-hint">Ctrl/&#8984; + Enter</span>
        <button id="clearBtn" class="secondary" type="button" onclick="clearAll()">Clear</button>
        <button id="sendBtn" type="button" onclick="generate()">Generate</button>
      </div>
    </div>
    <div id="status" class="status"></div>
    <div id="error" class="error-card hidden"></div>

    <div id="resultsToolbar" class="results-toolbar hidden">
      <button id="infoBtn" class="secondary" type="button" onclick="toggleInfo()">Hide All Format Info</button>
    </div>
    <div id="cards" class="cards"></div>
  </div>

  <div id="footer" class="footer"></div>
</div>

<div id="usageBar" class="usage-bar hidden">
  <div class="row">
    <span>Session Cost: <span id="usageCost" class="value cost"></span></span>
    <span class="sep">|</span>
    <span>Tokens: <span id="usageTokens" class="value tokens"></span></span>
    <span class="sep">|</span>
    <span>Requests: <span id="usageRequests" class="value requests"></span></span>
  </div>
  <span id="usageNote" class="note"></span>
</div>

<script>
  const MODEL_LABELS = /*__MODEL_LABELS__*/;
  const PROMPT_KEYS = /*__PROMPT_KEYS__*/;
  const APP_VERSION = /*__APP_VERSION__*/;

  const checkingEl = document.getElementById('checking');
  const loginViewEl = document.getElementById('loginView');
  const appViewEl = document.getElementById('appView');
  const passwordEl = document.getElementById('password');
  const loginErrorEl = document.getElementById('loginError');
  const loginBtn = document.getElementById('loginBtn');
  const intentEl = document.getElementById('intent');
  const sendBtn = document.getElementById('sendBtn');
  const statusEl = document.getElementById('status');
  const errorEl = document.getElementById('error');
  const toolbarEl = document.getElementById('resultsToolbar');
  const infoBtn = document.getElementById('infoBtn');
  const cardsEl = document.getElementById('cards');
  const usageBarEl = document.getElementById('usageBar');

  document.getElementById('footer').textContent = 'PromptOS v' + APP_VERSION;

  let authenticated = false;
  let showInfo = true;
  let expandedKey = null;
  let controller = null;

  // ── Timer helper ──
  function createTimer(el) {
    let interval = null;
    return {
      start() {
        const t0 = Date.now();
        clearInterval(interval);
        interval = setInterval(() => {
          const s = ((Date.now() - t0) / 1000).toFixed(1);
          el.innerHTML = '<span class="timer">' + s + 's</span> waiting for response...';
        }, 100);
      },
      stop() { clearInterval(interval); interval = null; }
    };
  }
  const timer = createTimer(statusEl);

  // ── Auth ──
  function showView(isAuthenticated) {
    authenticated = isAuthenticated;
    checkingEl.classList.add('hidden');
    loginViewEl.classList.toggle('hidden', isAuthenticated);
    appViewEl.classList.toggle('hidden', !isAuthenticated);
    usageBarEl.classList.toggle('hidden', !isAuthenticated);
    if (isAuthenticated) {
      intentEl.focus();
      fetchUsage();
    } else {
      passwordEl.focus();
    }
  }

  async function checkAuth() {
    try {
      const res = await fetch('/api/auth/check');
      showView(res.ok);
    } catch (e) {
      showView(false);
    }
  }

  async function login(event) {
    event.preventDefault();
    loginBtn.disabled = true;
    loginErrorEl.textContent = '';
    try {
      const res = await fetch('/api/auth', {
        method: 'POST',
        headers: { 'Content-Type': 'application/json' },
        body: JSON.stringify({ password: passwordEl.value }),
      });
      const data = await res.json();
      if (data.success) {
        passwordEl.value = '';
        showView(true);
      } else {
        loginErrorEl.textContent = 'Invalid password';
      }
    } catch (e) {
      loginErrorEl.textContent = 'Authentication failed';
    } finally {
      loginBtn.disabled = false;
    }
  }

  // ── API call helper ──
  async function callApi(intent, signal) {
    const res = await fetch('/api/generate', {
      method: 'POST',
      headers: { 'Content-Type': 'application/json' },
      body: JSON.stringify({ intent }),
      signal,
    });
    if (res.status === 401) {
      const err = new Error('Unauthorized');
      err.unauthorized = true;
      throw err;
    }
    const data = await res.json();
    if (!res.ok || data.error) throw new Error(data.error || 'HTTP ' + res.status);
    return data;
  }

  intentEl.addEventListener('keydown', e => {
    if (e.key === 'Enter' && (e.metaKey || e.ctrlKey)) { e.preventDefault(); generate(); }
  });

  async function generate() {
    const intent = intentEl.value.trim();
    if (!intent) return;

    if (controller) controller.abort();
    controller = new AbortController();

    sendBtn.disabled = true;
    sendBtn.textContent = 'Generating...';
    errorEl.classList.add('hidden');
    toolbarEl.classList.add('hidden');
    expandedKey = null;
    cardsEl.innerHTML = '<div class="loading"><div class="spinner"></div>Crafting four prompts...</div>';
    timer.start();

    try {
      const data = await callApi(intent, controller.signal);
      timer.stop();
      renderCards(data.prompts);
      statusEl.innerHTML = 'Completed in <span class="timer">' + data.elapsed + 's</span>';
      fetchUsage();
    } catch (e) {
      if (e.name === 'AbortError') return;
      timer.stop();
      cardsEl.innerHTML = '';
      statusEl.textContent = '';
      if (e.unauthorized) { showView(false); return; }
      errorEl.textContent = e.message || 'Something went wrong';
      errorEl.classList.remove('hidden');
    } finally {
      sendBtn.disabled = false;
      sendBtn.textContent = 'Generate';
      controller = null;
    }
  }

  // ── Cards ──
  function renderCards(prompts) {
    cardsEl.innerHTML = '';
    PROMPT_KEYS.forEach(key => {
      const label = MODEL_LABELS[key];
      const text = prompts[key] || '';

      const card = document.createElement('div');
      card.className = 'prompt-card';
      card.dataset.key = key;
      card.style.borderColor = label.accent + '80';

      const header = document.createElement('div');
      header.className = 'card-header';
      const name = document.createElement('span');
      name.className = 'card-name';
      name.style.color = label.accent;
      name.textContent = label.name;
      const company = document.createElement('span');
      company.className = 'card-company';
      company.textContent = label.company;
      const copyBtn = document.createElement('button');
      copyBtn.className = 'secondary';
      copyBtn.type = 'button';
      copyBtn.textContent = 'Copy';
      copyBtn.addEventListener('click', async () => {
        await navigator.clipboard.writeText(text);
        copyBtn.textContent = 'Copied!';
        copyBtn.classList.add('copied');
        setTimeout(() => {
          copyBtn.textContent = 'Copy';
          copyBtn.classList.remove('copied');
        }, 2000);
      });
      header.append(name, company, copyBtn);

      const info = document.createElement('div');
      info.className = 'format-info' + (showInfo ? '' : ' hidden');
      const fmt = document.createElement('div');
      fmt.innerHTML = 'Format: ';
      const fmtName = document.createElement('strong');
      fmtName.textContent = label.format;
      fmt.appendChild(fmtName);
      const desc = document.createElement('p');
      desc.textContent = label.description;
      info.append(fmt, desc);

      const pre = document.createElement('pre');
      pre.className = 'prompt-text';
      pre.textContent = text;

      const hint = document.createElement('p');
      hint.className = 'collapse-hint';
      hint.textContent = 'Click anywhere to collapse';

      card.append(header, info, pre, hint);
      card.addEventListener('click', e => {
        if (e.target.closest('button')) return;
        expandedKey = expandedKey === key ? null : key;
        applyExpanded();
      });
      cardsEl.appendChild(card);
    });
    toolbarEl.classList.remove('hidden');
    applyExpanded();
  }

  function applyExpanded() {
    cardsEl.classList.toggle('has-expanded', expandedKey !== null);
    cardsEl.querySelectorAll('.prompt-card').forEach(card => {
      card.classList.toggle('expanded', card.dataset.key === expandedKey);
    });
  }

  function toggleInfo() {
    showInfo = !showInfo;
    infoBtn.textContent = showInfo ? 'Hide All Format Info' : 'Show All Format Info';
    cardsEl.querySelectorAll('.format-info').forEach(el => el.classList.toggle('hidden', !showInfo));
  }

  function clearAll() {
    if (controller) controller.abort();
    intentEl.value = '';
    cardsEl.innerHTML = '';
    statusEl.textContent = '';
    errorEl.classList.add('hidden');
    toolbarEl.classList.add('hidden');
    expandedKey = null;
    intentEl.focus();
  }

  // ── Usage ──
  const currency = new Intl.NumberFormat('en-US', {
    style: 'currency', currency: 'USD', minimumFractionDigits: 4, maximumFractionDigits: 4,
  });
  const number = new Intl.NumberFormat('en-US');

  async function fetchUsage() {
    if (!authenticated) return;
    try {
      const res = await fetch('/api/usage');
      if (res.status === 401) { showView(false); return; }
      if (!res.ok) return;
      const data = await res.json();
      document.getElementById('usageCost').textContent = currency.format(data.session.estimatedCost);
      document.getElementById('usageTokens').textContent = number.format(data.session.totalTokens);
      document.getElementById('usageRequests').textContent = data.session.requestCount;
      document.getElementById('usageNote').textContent =
        data.provider + ' ' + data.model + ' (session tracking, resets on restart)';
    } catch (e) {
      // usage display is best effort
    }
  }
  setInterval(fetchUsage, 30000);

  checkAuth();
</script>
</body>
</html>
"""

DESKTOP_PAGE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>PromptOS Desktop</title>
<style>
  *, *::before, *::after { box-sizing: border-box; margin: 0; padding: 0; }

  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
    background: #09090b;
    color: #e0e0e0;
    min-height: 100vh;
  }

  .page {
    max-width: 1100px;
    margin: 0 auto;
    padding: 16px 24px 80px;
    display: flex;
    flex-direction: column;
    gap: 20px;
  }

  .top-bar {
    display: flex;
    align-items: center;
    gap: 12px;
  }
  .top-bar h1 { font-size: 1.4rem; font-weight: 700; color: #fff; }
  .top-bar .session { margin-left: auto; font-size: 0.74rem; color: #888; font-variant-numeric: tabular-nums; }
  .top-bar .session .cost { color: #fb923c; font-family: 'SF Mono', monospace; }

  .hidden { display: none !important; }

  .input-area { position: relative; }

  textarea {
    width: 100%;
    min-height: 140px;
    background: rgba(26,26,26,0.85);
    color: #e0e0e0;
    border: 1px solid #2a2a2a;
    border-radius: 10px;
    padding: 14px;
    padding-bottom: 46px;
    font-size: 0.95rem;
    font-family: inherit;
    resize: vertical;
    outline: none;
    transition: border-color 0.2s;
    line-height: 1.5;
  }
  textarea:focus { border-color: #8b5cf6; }
  textarea::placeholder { color: #555; }

  .input-footer {
    position: absolute;
    bottom: 15px;
    right: 13px;
    display: flex;
    gap: 8px;
    align-items: center;
  }

  button {
    background: #8b5cf6;
    color: #fff;
    border: none;
    border-radius: 8px;
    padding: 8px 20px;
    font-size: 0.82rem;
    font-weight: 500;
    cursor: pointer;
    transition: background 0.2s, opacity 0.2s;
  }
  button:hover { background: #7c3aed; }
  button:disabled { opacity: 0.5; cursor: not-allowed; }
  button.secondary { background: #232323; color: #aaa; border: 1px solid #333; }
  button.secondary:hover { background: #2e2e2e; color: #e0e0e0; }
  button.icon { padding: 6px 10px; font-size: 1rem; }

  .status { font-size: 0.78rem; color: #888; min-height: 1.2em; }
  .status .timer { color: #8b5cf6; font-variant-numeric: tabular-nums; }

  .error-card {
    border: 1px solid #ef4444;
    color: #fca5a5;
    background: #1a1111;
    border-radius: 10px;
    padding: 14px 16px;
    font-size: 0.88rem;
  }

  .loading { display: flex; align-items: center; gap: 10px; color: #888; font-size: 0.88rem; }
  .spinner {
    width: 16px; height: 16px;
    border: 2px solid #333;
    border-top-color: #8b5cf6;
    border-radius: 50%;
    animation: spin 0.8s linear infinite;
  }
  @keyframes spin { to { transform: rotate(360deg); } }

  .results-toolbar { display: flex; justify-content: flex-end; gap: 8px; }

  .cards { display: grid; grid-template-columns: repeat(2, minmax(0, 1fr)); gap: 16px; }
  .cards.has-expanded { grid-template-columns: minmax(0, 1fr); }
  @media (max-width: 760px) { .cards { grid-template-columns: minmax(0, 1fr); } }

  .prompt-card {
    background: rgba(20,20,22,0.9);
    border: 2px solid #2a2a2a;
    border-radius: 14px;
    padding: 16px;
    display: flex;
    flex-direction: column;
    gap: 12px;
    cursor: pointer;
    transition: transform 0.2s;
  }
  .prompt-card:hover { transform: scale(1.01); }
  .prompt-card.expanded:hover { transform: none; }
  .cards.has-expanded .prompt-card:not(.expanded) { display: none; }

  .card-header { display: flex; align-items: center; gap: 8px; }
  .card-name { font-weight: 700; font-size: 1.1rem; }
  .card-company { font-size: 0.72rem; color: #888; }
  .card-header button { margin-left: auto; }
  .card-header button.copied { background: #14532d; color: #4ade80; border-color: #22c55e; }

  .format-info {
    background: rgba(0,0,0,0.3);
    border: 1px solid #333;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.78rem;
    color: #a1a1aa;
    line-height: 1.5;
  }
  .format-info strong { color: #fff; font-family: 'SF Mono', 'Fira Code', monospace; font-weight: 500; }

  .prompt-text {
    margin: 0;
    padding: 12px;
    background: rgba(0,0,0,0.25);
    border-radius: 8px;
    font-family: 'SF Mono', 'Fira Code', 'Cascadia Code', monospace;
    font-size: 0.8rem;
    line-height: 1.55;
    color: #e4e4e7;
    white-space: pre-wrap;
    word-break: break-word;
    max-height: 16rem;
    overflow-y: auto;
  }
  .prompt-card.expanded .prompt-text { max-height: 60vh; }

  .collapse-hint { display: none; font-size: 0.72rem; color: #666; text-align: center; }
  .prompt-card.expanded .collapse-hint { display: block; }

  /* ── Settings modal ── */

  .modal-backdrop {
    position: fixed;
    inset: 0;
    background: rgba(0,0,0,0.7);
    display: flex;
    align-items: center;
    justify-content: center;
    z-index: 1000;
    padding: 16px;
  }

  .modal {
    width: 100%;
    max-width: 440px;
    max-height: 90vh;
    overflow-y: auto;
    background: #18181b;
    border: 1px solid #333;
    border-radius: 16px;
    padding: 24px;
    display: flex;
    flex-direction: column;
    gap: 14px;
  }
  .modal-header { display: flex; align-items: center; justify-content: space-between; }
  .modal-header h2 { font-size: 1.1rem; color: #fff; }
  .modal h3 { font-size: 0.9rem; color: #fff; margin-top: 6px; }
  .modal hr { border: none; border-top: 1px solid #2a2a2a; }

  .field { display: flex; flex-direction: column; gap: 6px; }
  .field label { font-size: 0.78rem; color: #a1a1aa; }
  .field .help { font-size: 0.7rem; color: #666; }
  .field .help a { color: #fb923c; }
  .field-row { display: flex; gap: 8px; align-items: center; }

  .modal input[type="password"], .modal select {
    width: 100%;
    background: #232323;
    color: #e0e0e0;
    border: 1px solid #3a3a3a;
    border-radius: 8px;
    padding: 10px 12px;
    font-size: 0.85rem;
    outline: none;
  }
  .modal input[type="password"] { font-family: 'SF Mono', monospace; }
  .modal input[type="password"]:focus, .modal select:focus { border-color: #8b5cf6; }
  .modal input[type="color"] { width: 44px; height: 32px; background: none; border: 1px solid #3a3a3a; border-radius: 6px; }
  .modal input[type="range"] { flex: 1; accent-color: #8b5cf6; }

  .checkbox { display: flex; align-items: center; gap: 10px; font-size: 0.82rem; color: #d4d4d8; cursor: pointer; }

  .presets { display: grid; grid-template-columns: repeat(3, 1fr); gap: 6px; }
  .preset {
    height: 40px;
    border-radius: 8px;
    border: 1px solid #3a3a3a;
    font-size: 0.66rem;
    color: #d4d4d8;
    padding: 0 4px;
  }
  .preset:hover { border-color: #8b5cf6; }
</style>
</head>
<body>

<div class="page">
  <div class="top-bar">
    <h1>PromptOS</h1>
    <span id="sessionUsage" class="session hidden"></span>
    <button class="secondary icon" type="button" title="Settings" onclick="openSettings()">&#9881;</button>
  </div>

  <div class="input-area">
    <textarea id="intent" placeholder="Describe what you want the prompt to do..."></textarea>
    <div class="input-footer">
      <button class="secondary" type="button" onclick="clearAll()">Clear</button>
      <button id="sendBtn" type="button" onclick="generate()">Generate</button>
    </div>
  </div>
  <div id="status" class="status"></div>
  <div id="error" class="error-card hidden"></div>

  <div id="resultsToolbar" class="results-toolbar hidden">
    <button id="infoBtn" class="secondary" type="button" onclick="toggleInfo()">Hide All Format Info</button>
  </div>
  <div id="cards" class="cards"></div>
</div>

<!-- ── Settings ── -->
<div id="settingsModal" class="modal-backdrop hidden">
  <form class="modal" onsubmit="saveApiKey(event)">
    <div class="modal-header">
      <h2>Settings</h2>
      <button class="secondary icon" type="button" onclick="closeSettings()">&#10005;</button>
    </div>

    <div class="field">
      <label for="apiKey">Gemini API Key</label>
      <input id="apiKey" type="password" placeholder="AIza..." autocomplete="off">
      <span class="help">Your API key is stored locally in this browser.
        <a href="https://aistudio.google.com/apikey" target="_blank" rel="noopener noreferrer">Get your key</a></span>
      <div class="field-row">
        <button type="submit">Save Key</button>
        <button class="secondary" type="button" onclick="clearApiKey()">Remove Key</button>
      </div>
    </div>

    <hr>

    <div class="field">
      <label for="defaultModel">Default Model (shown first)</label>
      <select id="defaultModel"></select>
    </div>
    <div class="field">
      <label for="autoCopyModel">Auto-copy prompt after generation</label>
      <select id="autoCopyModel"><option value="">Disabled</option></select>
    </div>
    <label class="checkbox">
      <input id="showFormatInfo" type="checkbox">
      Show format info by default
    </label>

    <hr>

    <h3>Background</h3>
    <div class="field">
      <label for="bgType">Style</label>
      <select id="bgType">
        <option value="solid">Solid Color</option>
        <option value="gradient-linear">Linear Gradient</option>
        <option value="gradient-radial">Radial Gradient</option>
      </select>
    </div>
    <div class="field">
      <label>Presets</label>
      <div id="presets" class="presets"></div>
    </div>
    <div class="field">
      <label>Colors</label>
      <div class="field-row">
        <input id="bgColor1" type="color">
        <input id="bgColor2" type="color">
      </div>
    </div>
    <div class="field">
      <label for="bgOpacity">Opacity</label>
      <div class="field-row">
        <input id="bgOpacity" type="range" min="0" max="100">
        <span id="bgOpacityValue" class="help"></span>
      </div>
    </div>
    <button class="secondary" type="button" onclick="resetBackground()">Reset Background</button>
  </form>
</div>

<script>
  const MODEL_LABELS = /*__MODEL_LABELS__*/;
  const PROMPT_KEYS = /*__PROMPT_KEYS__*/;
  const META_PROMPT = /*__META_PROMPT__*/;
  const USER_PROMPT_TEMPLATE = /*__USER_PROMPT_TEMPLATE__*/;
  const MODEL = /*__MODEL__*/;
  const MAX_OUTPUT_TOKENS = /*__MAX_OUTPUT_TOKENS__*/;
  const PRICING = /*__PRICING__*/;

  const API_KEY_STORAGE = 'promptos_api_key';
  const SETTINGS_STORAGE = 'promptos_settings';

  const DEFAULT_BACKGROUND = {
    type: 'gradient-linear',
    color1: '#09090b',
    color2: '#18181b',
    opacity: 100,
  };

  const DEFAULT_SETTINGS = {
    defaultModel: 'claude',
    autoCopyModel: null,
    showFormatInfo: true,
    background: DEFAULT_BACKGROUND,
  };

  const BACKGROUND_PRESETS = [
    { name: 'Default Dark', color1: '#09090b', color2: '#18181b' },
    { name: 'Deep Purple', color1: '#1e1033', color2: '#0f0a1a' },
    { name: 'Ocean Blue', color1: '#0c1929', color2: '#0a1420' },
    { name: 'Forest Green', color1: '#0a1f1a', color2: '#051210' },
    { name: 'Warm Ember', color1: '#1f1410', color2: '#120a08' },
    { name: 'Midnight', color1: '#0a0a0f', color2: '#000000' },
  ];

  const intentEl = document.getElementById('intent');
  const sendBtn = document.getElementById('sendBtn');
  const statusEl = document.getElementById('status');
  const errorEl = document.getElementById('error');
  const toolbarEl = document.getElementById('resultsToolbar');
  const infoBtn = document.getElementById('infoBtn');
  const cardsEl = document.getElementById('cards');
  const sessionUsageEl = document.getElementById('sessionUsage');
  const modalEl = document.getElementById('settingsModal');
  const apiKeyEl = document.getElementById('apiKey');

  let apiKey = localStorage.getItem(API_KEY_STORAGE) || '';
  let settings = loadSettings();
  let showInfo = settings.showFormatInfo;
  let expandedKey = null;
  let sessionUsage = { inputTokens: 0, outputTokens: 0, estimatedCost: 0 };

  // ── Settings persistence ──
  function loadSettings() {
    const stored = localStorage.getItem(SETTINGS_STORAGE);
    if (!stored) return { ...DEFAULT_SETTINGS, background: { ...DEFAULT_BACKGROUND } };
    try {
      const parsed = JSON.parse(stored);
      // Older stored settings may predate the background block
      return {
        ...DEFAULT_SETTINGS,
        ...parsed,
        background: { ...DEFAULT_BACKGROUND, ...(parsed.background || {}) },
      };
    } catch (e) {
      console.error('Failed to parse settings:', e);
      return { ...DEFAULT_SETTINGS, background: { ...DEFAULT_BACKGROUND } };
    }
  }

  function updateSettings(patch) {
    settings = { ...settings, ...patch };
    localStorage.setItem(SETTINGS_STORAGE, JSON.stringify(settings));
    applyBackground();
  }

  function hexToRgba(hex, alpha) {
    const r = parseInt(hex.slice(1, 3), 16);
    const g = parseInt(hex.slice(3, 5), 16);
    const b = parseInt(hex.slice(5, 7), 16);
    if ([r, g, b].some(Number.isNaN)) return 'rgba(9, 9, 11, ' + alpha + ')';
    return 'rgba(' + r + ', ' + g + ', ' + b + ', ' + alpha + ')';
  }

  function applyBackground() {
    const bg = settings.background || DEFAULT_BACKGROUND;
    const alpha = bg.opacity / 100;
    const c1 = hexToRgba(bg.color1 || DEFAULT_BACKGROUND.color1, alpha);
    const c2 = hexToRgba(bg.color2 || DEFAULT_BACKGROUND.color2, alpha);
    let value;
    if (bg.type === 'solid') value = c1;
    else if (bg.type === 'gradient-linear') value = 'linear-gradient(to bottom, ' + c1 + ', ' + c2 + ')';
    else value = 'radial-gradient(ellipse at center, ' + c1 + ', ' + c2 + ')';
    document.body.style.background = value;
    document.body.style.backgroundAttachment = 'fixed';
  }

  // ── Settings modal ──
  const defaultModelEl = document.getElementById('defaultModel');
  const autoCopyEl = document.getElementById('autoCopyModel');
  const showInfoEl = document.getElementById('showFormatInfo');
  const bgTypeEl = document.getElementById('bgType');
  const bgColor1El = document.getElementById('bgColor1');
  const bgColor2El = document.getElementById('bgColor2');
  const bgOpacityEl = document.getElementById('bgOpacity');
  const bgOpacityValueEl = document.getElementById('bgOpacityValue');

  PROMPT_KEYS.forEach(key => {
    defaultModelEl.add(new Option(MODEL_LABELS[key].name, key));
    autoCopyEl.add(new Option(MODEL_LABELS[key].name, key));
  });

  BACKGROUND_PRESETS.forEach(preset => {
    const btn = document.createElement('button');
    btn.type = 'button';
    btn.className = 'preset';
    btn.textContent = preset.name;
    btn.style.background = 'linear-gradient(to bottom, ' + preset.color1 + ', ' + preset.color2 + ')';
    btn.addEventListener('click', () => {
      updateSettings({ background: { ...settings.background, color1: preset.color1, color2: preset.color2 } });
      syncSettingsForm();
    });
    document.getElementById('presets').appendChild(btn);
  });

  function syncSettingsForm() {
    apiKeyEl.value = apiKey;
    defaultModelEl.value = settings.defaultModel;
    autoCopyEl.value = settings.autoCopyModel || '';
    showInfoEl.checked = settings.showFormatInfo;
    bgTypeEl.value = settings.background.type;
    bgColor1El.value = settings.background.color1;
    bgColor2El.value = settings.background.color2;
    bgOpacityEl.value = settings.background.opacity;
    bgOpacityValueEl.textContent = settings.background.opacity + '%';
  }

  defaultModelEl.addEventListener('change', () => updateSettings({ defaultModel: defaultModelEl.value }));
  autoCopyEl.addEventListener('change', () => updateSettings({ autoCopyModel: autoCopyEl.value || null }));
  showInfoEl.addEventListener('change', () => {
    updateSettings({ showFormatInfo: showInfoEl.checked });
    setShowInfo(showInfoEl.checked);
  });
  bgTypeEl.addEventListener('change', () => updateSettings({ background: { ...settings.background, type: bgTypeEl.value } }));
  bgColor1El.addEventListener('input', () => updateSettings({ background: { ...settings.background, color1: bgColor1El.value } }));
  bgColor2El.addEventListener('input', () => updateSettings({ background: { ...settings.background, color2: bgColor2El.value } }));
  bgOpacityEl.addEventListener('input', () => {
    bgOpacityValueEl.textContent = bgOpacityEl.value + '%';
    updateSettings({ background: { ...settings.background, opacity: Number(bgOpacityEl.value) } });
  });

  function resetBackground() {
    updateSettings({ background: { ...DEFAULT_BACKGROUND } });
    syncSettingsForm();
  }

  function openSettings() {
    syncSettingsForm();
    modalEl.classList.remove('hidden');
    apiKeyEl.focus();
  }

  function closeSettings() {
    modalEl.classList.add('hidden');
    intentEl.focus();
  }

  function saveApiKey(event) {
    event.preventDefault();
    const value = apiKeyEl.value.trim();
    if (!value) return;
    localStorage.setItem(API_KEY_STORAGE, value);
    apiKey = value;
    closeSettings();
  }

  function clearApiKey() {
    localStorage.removeItem(API_KEY_STORAGE);
    apiKey = '';
    apiKeyEl.value = '';
    apiKeyEl.focus();
  }

  // ── Direct LLM call ──
  function stripCodeFences(text) {
    let content = text.trim();
    if (content.startsWith('```json')) content = content.slice(7);
    else if (content.startsWith('```')) content = content.slice(3);
    if (content.endsWith('```')) content = content.slice(0, -3);
    return content.trim();
  }

  // A replacer function keeps `$&`, `$'` and friends in the intent literal
  function buildUserPrompt(intent) {
    return USER_PROMPT_TEMPLATE.replace('{intent}', () => intent);
  }

  function isPromptSet(value) {
    return value !== null && typeof value === 'object' && !Array.isArray(value)
      && PROMPT_KEYS.every(key => typeof value[key] === 'string');
  }

  async function generatePromptsClient(intent, key, signal) {
    const url = 'https://generativelanguage.googleapis.com/v1beta/models/' + MODEL + ':generateContent';
    const res = await fetch(url, {
      method: 'POST',
      headers: { 'Content-Type': 'application/json', 'x-goog-api-key': key },
      body: JSON.stringify({
        systemInstruction: { parts: [{ text: META_PROMPT }] },
        contents: [{ role: 'user', parts: [{ text: buildUserPrompt(intent) }] }],
        generationConfig: { maxOutputTokens: MAX_OUTPUT_TOKENS },
      }),
      signal,
    });

    if (!res.ok) {
      console.error('LLM API error:', await res.text());
      const err = new Error(
        [400, 401, 403].includes(res.status)
          ? 'Request rejected (HTTP ' + res.status + '). Check your API key.'
          : 'Failed to generate prompts'
      );
      err.keyProblem = [400, 401, 403].includes(res.status);
      throw err;
    }

    const data = await res.json();
    const parts = ((data.candidates || [])[0] || {}).content?.parts || [];
    const first = parts.find(p => p.text && !p.thought);
    if (!first) throw new Error('No content in response');

    let prompts;
    try {
      prompts = JSON.parse(stripCodeFences(first.text));
    } catch (e) {
      prompts = null;
    }
    if (!isPromptSet(prompts)) {
      console.error('Failed to parse model response:', first.text);
      throw new Error('Failed to parse generated prompts');
    }

    const usage = data.usageMetadata || {};
    return {
      prompts,
      usage: {
        input_tokens: usage.promptTokenCount || 0,
        output_tokens: (usage.candidatesTokenCount || 0) + (usage.thoughtsTokenCount || 0),
      },
    };
  }

  // ── Timer helper ──
  function createTimer(el) {
    let interval = null;
    return {
      start() {
        const t0 = Date.now();
        clearInterval(interval);
        interval = setInterval(() => {
          const s = ((Date.now() - t0) / 1000).toFixed(1);
          el.innerHTML = '<span class="timer">' + s + 's</span> waiting for response...';
        }, 100);
      },
      stop() { clearInterval(interval); interval = null; }
    };
  }
  const timer = createTimer(statusEl);
  let controller = null;

  intentEl.addEventListener('keydown', e => {
    if (e.key === 'Enter' && (e.metaKey || e.ctrlKey)) { e.preventDefault(); generate(); }
  });

  async function generate() {
    const intent = intentEl.value.trim();
    if (!intent) return;

    if (!apiKey) {
      showError('Please set your Gemini API key first');
      openSettings();
      return;
    }

    if (controller) controller.abort();
    controller = new AbortController();

    sendBtn.disabled = true;
    sendBtn.textContent = 'Generating...';
    errorEl.classList.add('hidden');
    toolbarEl.classList.add('hidden');
    expandedKey = null;
    cardsEl.innerHTML = '<div class="loading"><div class="spinner"></div>Crafting four prompts...</div>';
    const t0 = Date.now();
    timer.start();

    try {
      const result = await generatePromptsClient(intent, apiKey, controller.signal);
      timer.stop();
      renderCards(result.prompts);
      statusEl.innerHTML = 'Completed in <span class="timer">' + ((Date.now() - t0) / 1000).toFixed(1) + 's</span>';
      addUsage(result.usage);

      if (settings.autoCopyModel && result.prompts[settings.autoCopyModel]) {
        await autoCopy(settings.autoCopyModel, result.prompts[settings.autoCopyModel]);
      }
    } catch (e) {
      if (e.name === 'AbortError') return;
      timer.stop();
      cardsEl.innerHTML = '';
      statusEl.textContent = '';
      showError(e.message || 'Something went wrong');
      if (e.keyProblem) openSettings();
    } finally {
      sendBtn.disabled = false;
      sendBtn.textContent = 'Generate';
      controller = null;
    }
  }

  // Clipboard access can lapse during a long request; the cards stay either way
  async function autoCopy(key, text) {
    const name = MODEL_LABELS[key].name;
    try {
      await navigator.clipboard.writeText(text);
      statusEl.innerHTML += ' &middot; ' + name + ' prompt copied';
    } catch (e) {
      console.warn('Auto-copy failed:', e);
      statusEl.innerHTML += ' &middot; auto-copy of ' + name + ' failed, use its Copy button';
    }
  }

  function showError(message) {
    errorEl.textContent = message;
    errorEl.classList.remove('hidden');
  }

  function addUsage(usage) {
    const inputCost = usage.input_tokens / 1000000 * PRICING.inputPer1M;
    const outputCost = usage.output_tokens / 1000000 * PRICING.outputPer1M;
    sessionUsage = {
      inputTokens: sessionUsage.inputTokens + usage.input_tokens,
      outputTokens: sessionUsage.outputTokens + usage.output_tokens,
      estimatedCost: sessionUsage.estimatedCost + inputCost + outputCost,
    };
    sessionUsageEl.innerHTML = 'Session: ' + sessionUsage.inputTokens.toLocaleString() + ' in / '
      + sessionUsage.outputTokens.toLocaleString() + ' out &middot; <span class="cost">~$'
      + sessionUsage.estimatedCost.toFixed(4) + '</span>';
    sessionUsageEl.title = PRICING.label + ' rates';
    sessionUsageEl.classList.remove('hidden');
  }

  // ── Cards ──
  function orderedKeys() {
    const first = settings.defaultModel;
    if (!PROMPT_KEYS.includes(first)) return PROMPT_KEYS;
    return [first, ...PROMPT_KEYS.filter(k => k !== first)];
  }

  function renderCards(prompts) {
    cardsEl.innerHTML = '';
    orderedKeys().forEach(key => {
      const label = MODEL_LABELS[key];
      const text = prompts[key] || '';

      const card = document.createElement('div');
      card.className = 'prompt-card';
      card.dataset.key = key;
      card.style.borderColor = label.accent + '80';

      const header = document.createElement('div');
      header.className = 'card-header';
      const name = document.createElement('span');
      name.className = 'card-name';
      name.style.color = label.accent;
      name.textContent = label.name;
      const company = document.createElement('span');
      company.className = 'card-company';
      company.textContent = label.company;
      const copyBtn = document.createElement('button');
      copyBtn.className = 'secondary';
      copyBtn.type = 'button';
      copyBtn.textContent = 'Copy';
      copyBtn.addEventListener('click', async () => {
        await navigator.clipboard.writeText(text);
        copyBtn.textContent = 'Copied!';
        copyBtn.classList.add('copied');
        setTimeout(() => {
          copyBtn.textContent = 'Copy';
          copyBtn.classList.remove('copied');
        }, 2000);
      });
      header.append(name, company, copyBtn);

      const info = document.createElement('div');
      info.className = 'format-info' + (showInfo ? '' : ' hidden');
      const fmt = document.createElement('div');
      fmt.innerHTML = 'Format: ';
      const fmtName = document.createElement('strong');
      fmtName.textContent = label.format;
      fmt.appendChild(fmtName);
      const desc = document.createElement('p');
      desc.textContent = label.description;
      info.append(fmt, desc);

      const pre = document.createElement('pre');
      pre.className = 'prompt-text';
      pre.textContent = text;

      const hint = document.createElement('p');
      hint.className = 'collapse-hint';
      hint.textContent = 'Click anywhere to collapse';

      card.append(header, info, pre, hint);
      card.addEventListener('click', e => {
        if (e.target.closest('button')) return;
        expandedKey = expandedKey === key ? null : key;
        applyExpanded();
      });
      cardsEl.appendChild(card);
    });
    toolbarEl.classList.remove('hidden');
    applyExpanded();
  }

  function applyExpanded() {
    cardsEl.classList.toggle('has-expanded', expandedKey !== null);
    cardsEl.querySelectorAll('.prompt-card').forEach(card => {
      card.classList.toggle('expanded', card.dataset.key === expandedKey);
    });
  }

  function setShowInfo(value) {
    showInfo = value;
    infoBtn.textContent = showInfo ? 'Hide All Format Info' : 'Show All Format Info';
    cardsEl.querySelectorAll('.format-info').forEach(el => el.classList.toggle('hidden', !showInfo));
  }

  function toggleInfo() { setShowInfo(!showInfo); }

  function clearAll() {
    if (controller) controller.abort();
    intentEl.value = '';
    cardsEl.innerHTML = '';
    statusEl.textContent = '';
    errorEl.classList.add('hidden');
    toolbarEl.classList.add('hidden');
    expandedKey = null;
    intentEl.focus();
  }

  applyBackground();
  setShowInfo(showInfo);
  if (apiKey) intentEl.focus();
  else openSettings();
</script>
</body>
</html>
"""

if __name__ == "__main__":
    app.run(debug=True, port=int(os.environ.get("PORT", "5001")), threaded=True)
