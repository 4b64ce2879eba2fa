HTML = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>glosco live</title>
  <style>
    body { background:#14181d; color:#e8eaed; font-family: ui-sans-serif,system-ui,Segoe UI,Arial; margin: 12px; }
    #net { border: 1px solid #2a2f36; border-radius: 12px; background:#101317; cursor: default; }
    #bar { display:flex; gap:16px; align-items:center; flex-wrap:wrap; margin-bottom:8px; }
    #bar input[type=number] { width: 6em; }
    #bar input[type=text] { width: 24em; }
    #idents label { margin-right: 10px; }
    #status { color:#9aa0a6; font-size: 12px; }
  </style>
</head>
<body>
  <h2>Connection State Map (Live)</h2>
  <div id="bar">
    <label>store <input type="text" id="store"/></label><button id="reopen">re-open</button>
    <label>history (s) <input type="number" id="history" step="0.5" min="0"/></label>
    <label>update (ms) <input type="number" id="period" step="50" min="1"/></label>
    <button id="apply">apply</button>
  </div>
  <div id="idents"></div>
  <div id="status"></div>
  <canvas id="net" width="__WIDTH__" height="__HEIGHT__"></canvas>

  <script>
  const POLL_MS = __PERIOD__;
  const HOST_R = 6;
  const canvas = document.getElementById('net');
  const ctx = canvas.getContext('2d');
  let frame = {lines: [], labels: [], hosts: []};
  let drag = null;

  function rgba(hex, a){
    const n = parseInt(hex.slice(1), 16);
    return `rgba(${(n>>16)&255},${(n>>8)&255},${n&255},${a})`;
  }

  function draw(){
    ctx.clearRect(0, 0, canvas.width, canvas.height);
    ctx.lineWidth = 2;
    frame.lines.forEach(l=>{
      ctx.strokeStyle = rgba(l.color, l.alpha);
      ctx.beginPath(); ctx.moveTo(l.from[0], l.from[1]); ctx.lineTo(l.to[0], l.to[1]); ctx.stroke();
    });
    frame.labels.forEach(t=>{
      ctx.font = `${t.font_size}px ui-monospace,monospace`;
      ctx.textAlign = t.align;
      ctx.fillStyle = rgba(t.color, t.alpha);
      ctx.fillText(t.text, t.pos[0] + (t.align === 'right' ? -HOST_R : HOST_R), t.pos[1]);
    });
    frame.hosts.forEach(h=>{
      ctx.fillStyle = '#9aa0a6';
      ctx.beginPath(); ctx.arc(h.x, h.y, HOST_R, 0, 2*Math.PI); ctx.fill();
      ctx.font = '13px ui-sans-serif,system-ui'; ctx.textAlign = 'center'; ctx.fillStyle = '#e8eaed';
      ctx.fillText(h.label, h.x, h.y - 2*HOST_R);
    });
  }

  function hostAt(x, y){
    return frame.hosts.find(h => (h.x-x)**2 + (h.y-y)**2 <= (2*HOST_R)**2);
  }

  function lineAt(x, y){
    // topmost line within 4px of the pointer
    for (let i = frame.lines.length - 1; i >= 0; i--){
      const l = frame.lines[i];
      const dx = l.to[0] - l.from[0], dy = l.to[1] - l.from[1];
      const len2 = dx*dx + dy*dy;
      let t = len2 ? ((x - l.from[0])*dx + (y - l.from[1])*dy) / len2 : 0;
      t = Math.max(0, Math.min(1, t));
      const px = l.from[0] + t*dx, py = l.from[1] + t*dy;
      if ((px-x)**2 + (py-y)**2 <= 16) return l;
    }
    return null;
  }

  function post(url, body){
    return fetch(url, {method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify(body)});
  }

  canvas.addEventListener('mousedown', ev=>{
    const h = hostAt(ev.offsetX, ev.offsetY);
    if (h) drag = h;
  });
  canvas.addEventListener('mousemove', ev=>{
    if (!drag){
      const h = hostAt(ev.offsetX, ev.offsetY);
      const l = h ? null : lineAt(ev.offsetX, ev.offsetY);
      canvas.title = h ? h.label : (l ? l.title : '');
      canvas.style.cursor = h ? 'grab' : 'default';
      return;
    }
    drag.x = ev.offsetX; drag.y = ev.offsetY;
    draw();
  });
  canvas.addEventListener('mouseup', ()=>{
    if (!drag) return;
    post(`/api/hosts/${encodeURIComponent(drag.id)}/position`, {x: drag.x, y: drag.y});
    drag = null;
  });

  async function refreshIdents(){
    const r = await fetch('/api/idents');
    const data = await r.json();
    const box = document.getElementById('idents');
    const checked = new Set(data.interest);
    const have = new Set([...box.querySelectorAll('input')].map(i=>i.value));
    data.idents.forEach(id=>{
      if (have.has(id)) return;
      const lab = document.createElement('label');
      const cb = document.createElement('input');
      cb.type = 'checkbox'; cb.value = id; cb.checked = checked.has(id);
      cb.addEventListener('change', ()=>{
        const sel = [...box.querySelectorAll('input:checked')].map(i=>i.value);
        post('/api/interest', {idents: sel});
      });
      lab.appendChild(cb); lab.appendChild(document.createTextNode(' ' + id));
      box.appendChild(lab);
    });
  }

  async function refreshStatus(first){
    const r = await fetch('/api/status');
    const s = await r.json();
    if (first){
      document.getElementById('store').value = s.store.path || '';
      document.getElementById('history').value = s.poll.history;
      document.getElementById('period').value = s.poll.update_period;
    }
    document.getElementById('status').textContent =
      `store ${s.store.open ? 'open' : 'unavailable'} | rows ${s.poll.rows} | hosts ${s.hosts}` +
      (s.poll.last_error ? ` | error: ${s.poll.last_error}` : '');
  }

  document.getElementById('apply').addEventListener('click', ()=>{
    post('/api/config', {
      history: parseFloat(document.getElementById('history').value),
      update_period: parseInt(document.getElementById('period').value, 10),
    });
  });
  document.getElementById('reopen').addEventListener('click', ()=>{
    post('/api/store', {path: document.getElementById('store').value});
  });

  async function refresh(){
    if (drag) return;
    try{
      const r = await fetch('/api/frame');
      frame = await r.json();
      draw();
    }catch(e){ console.error(e); }
  }

  setInterval(refresh, POLL_MS);
  setInterval(()=>{ refreshIdents().catch(console.error); refreshStatus(false).catch(console.error); }, 2000);
  refresh(); refreshIdents(); refreshStatus(true);
  </script>
</body>
</html>
"""

def render_html(width: int, height: int, update_period: int) -> str:
    html = HTML.replace("__WIDTH__", str(int(width)))
    html = html.replace("__HEIGHT__", str(int(height)))
    html = html.replace("__PERIOD__", str(max(int(update_period), 50)))
    return html
