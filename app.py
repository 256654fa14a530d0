import time
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request, render_template_string

from avltrace import config
from avltrace.layout import calculate_layout
from avltrace.nodes import TreeNode, tree_to_dict
from avltrace.session import Session, parse_key

app = Flask(__name__)

session = Session()

STATE: Dict[str, Any] = {"seed": config.SEED_KEYS, "seeded": False}


def ok(data=None, **extra):
    payload = {"ok": True}
    if data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload)

def err(message: str, status: int = 400, **extra):
    payload = {"ok": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status

def read_key(field: str = "value") -> Optional[int]:
    data = request.get_json(silent=True) or {}
    return parse_key(data.get(field))

def warm_start():
    """Insert AVLTRACE_SEED keys so the page opens on a non-empty tree."""
    raw = (STATE["seed"] or "").strip()
    if not raw:
        print("[warm_start] No seed keys provided.")
        return

    keys = [parse_key(part) for part in raw.split(",")]
    bad = [part for part, key in zip(raw.split(","), keys) if key is None]
    if bad:
        print(f"[warm_start] Ignoring invalid seed keys: {bad}")

    print(f"[warm_start] Seeding tree with {len(keys) - len(bad)} keys")
    t0 = time.time()
    for key in keys:
        if key is not None:
            session.insert(key)
    t1 = time.time()
    STATE["seeded"] = True
    print(f"[warm_start] Tree seeded: {len(session)} nodes, {len(session.steps)} frames in {t1 - t0:.3f}s")


@app.get("/api/status")
def api_status():
    return ok(session.status())


@app.post("/api/insert")
def api_insert():
    value = read_key()
    if value is None:
        return err("value must be an integer: {\"value\": 42}")
    result = session.insert(value)
    return ok({**result.to_dict(), "status": session.status()})

@app.post("/api/delete")
def api_delete():
    value = read_key()
    if value is None:
        return err("value must be an integer: {\"value\": 42}")
    result = session.delete(value)
    return ok({**result.to_dict(), "status": session.status()})

@app.post("/api/undo")
def api_undo():
    entry = session.undo()
    if entry is None:
        return err("nothing to undo", 409)
    return ok({"undone": entry.label, "status": session.status()})

@app.post("/api/reset")
def api_reset():
    session.reset()
    return ok(session.status())


@app.post("/api/step")
def api_step():
    data = request.get_json(silent=True) or {}
    if "index" in data:
        index = parse_key(data.get("index"))
        if index is None:
            return err("index must be an integer")
        try:
            session.seek(index)
        except IndexError as exc:
            return err(str(exc))
    else:
        delta = parse_key(data.get("delta", 1))
        if delta is None:
            return err("delta must be an integer")
        session.step(delta)
    return ok(session.frame())

@app.post("/api/tick")
def api_tick():
    moved = session.tick()
    return ok({"moved": moved, **session.frame()})

@app.post("/api/play")
def api_play():
    return ok({"playing": session.toggle_play()})

@app.post("/api/speed")
def api_speed():
    ms = read_key("ms")
    if ms is None:
        return err("ms must be an integer")
    return ok({"speed_ms": session.set_speed(ms)})


@app.get("/api/frame")
def api_frame():
    offset = parse_key(request.args.get("offset", "0"))
    if offset is None or offset < 0:
        return err("offset must be a non-negative integer")
    return ok(session.frame(offset))

@app.get("/api/steps")
def api_steps():
    return ok({
        "count": len(session.steps),
        "step_index": session.step_index,
        "steps": [step.to_dict() for step in session.steps],
    })

@app.post("/api/layout")
def api_layout():
    data = request.get_json(silent=True)
    if not isinstance(data, dict) or "tree" not in data:
        return err("tree JSON body required: {\"tree\": {...}}")
    try:
        root = TreeNode.from_dict(data["tree"])
    except (KeyError, TypeError, ValueError) as exc:
        return err(f"malformed tree: {exc}")
    return ok({"tree": tree_to_dict(calculate_layout(root))})


HTML = r"""
<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>AVL Trace</title>
<style>
  body{font-family:system-ui,sans-serif;background:#020617;color:#e2e8f0;margin:0;display:flex;height:100vh}
  aside{width:260px;padding:16px;border-right:1px solid #1e293b}
  main{flex:1;display:flex;flex-direction:column}
  header{padding:16px;border-bottom:1px solid #1e293b}
  .tag{font-size:10px;font-weight:800;text-transform:uppercase;padding:2px 6px;border-radius:4px;background:#4f46e5}
  .tag.rotate{background:#f59e0b;color:#451a03}.tag.imbalance{background:#e11d48}
  .panes{flex:1;display:flex}.pane{flex:1;position:relative;border-right:1px solid #1e293b}
  .pane h4{position:absolute;top:4px;left:8px;margin:0;font-size:10px;color:#818cf8;text-transform:uppercase}
  svg{width:100%;height:100%}
  input,button{background:#0f172a;color:#e2e8f0;border:1px solid #334155;border-radius:6px;padding:6px;margin:2px}
  ul{font-size:12px;padding-left:16px}
</style>
</head>
<body>
<aside>
  <input id="val" type="number" placeholder="key">
  <div>
    <button onclick="op('insert')">Insert</button>
    <button onclick="op('delete')">Delete</button>
    <button onclick="post('/api/undo').then(refresh)">Undo</button>
  </div>
  <div>
    <button onclick="move(-1)">&larr;</button>
    <button onclick="post('/api/play').then(loop)">Play / Pause</button>
    <button onclick="move(1)">&rarr;</button>
  </div>
  <div>
    <button onclick="panel(1)">Older</button>
    <button onclick="panel(-1)">Newer</button>
  </div>
  <ul id="history"></ul>
</aside>
<main>
  <header><span id="tag" class="tag">idle</span> <span id="desc">Awaiting input...</span></header>
  <div class="panes">
    <div class="pane"><h4 id="leftLabel">Ready</h4><svg id="left" viewBox="0 0 100 100" preserveAspectRatio="none"></svg></div>
    <div class="pane"><h4>Execution Trace</h4><svg id="main" viewBox="0 0 100 100" preserveAspectRatio="none"></svg></div>
  </div>
</main>
<script>
  let offset = 0, timer = null;
  const el = (id) => document.getElementById(id);

  async function post(url, body){
    const r = await fetch(url, {method:"POST", headers:{"Content-Type":"application/json"}, body: JSON.stringify(body || {})});
    return r.json();
  }

  function draw(svg, root, hl){
    let out = "";
    const edges = (n) => {
      if(!n) return;
      for(const c of [n.left, n.right]){
        if(c){ out += `<line x1="${n.x}" y1="${n.y}" x2="${c.x}" y2="${c.y}" stroke="#334155" stroke-width="0.3"/>`; edges(c); }
      }
    };
    const nodes = (n) => {
      if(!n) return;
      const fill = n.id === hl ? "#f59e0b" : (Math.abs(n.balanceFactor) > 1 ? "#e11d48" : "#4f46e5");
      out += `<circle cx="${n.x}" cy="${n.y}" r="3" fill="${fill}"/>`;
      out += `<text x="${n.x}" y="${n.y + 1}" font-size="2.5" text-anchor="middle" fill="#fff">${n.value}</text>`;
      out += `<text x="${n.x}" y="${n.y + 5.5}" font-size="1.8" text-anchor="middle" fill="#94a3b8">h${n.height} bf${n.balanceFactor}</text>`;
      nodes(n.left); nodes(n.right);
    };
    edges(root); nodes(root);
    svg.innerHTML = out;
  }

  async function refresh(){
    const r = await (await fetch(`/api/frame?offset=${offset}`)).json();
    const s = await (await fetch("/api/status")).json();
    const step = r.data.step;
    el("tag").textContent = step ? step.actionType : "idle";
    el("tag").className = "tag " + (step ? step.actionType : "");
    el("desc").textContent = step ? step.description : "Awaiting input...";
    el("leftLabel").textContent = r.data.comparison.label;
    draw(el("main"), r.data.display_tree, step && step.highlightNodeId);
    draw(el("left"), r.data.comparison.tree, null);
    el("history").innerHTML = s.data.history.map(h => `<li>${h}</li>`).join("");
    return s.data;
  }

  async function loop(){
    clearTimeout(timer);
    const s = await refresh();
    if(!s.playing) return;
    timer = setTimeout(async () => { await post("/api/tick"); loop(); }, s.speed_ms);
  }

  async function op(kind){
    const r = await post(`/api/${kind}`, {value: el("val").value});
    if(!r.ok){ el("desc").textContent = r.error; return; }
    offset = 0; loop();
  }

  async function move(d){ await post("/api/step", {delta: d}); refresh(); }
  function panel(d){ offset = Math.max(0, offset + d); refresh(); }

  refresh();
</script>
</body>
</html>
"""

@app.get("/")
def home():
    return render_template_string(HTML)

if __name__ == "__main__":
    warm_start()
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG, use_reloader=False)
