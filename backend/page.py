# Minimal chat client served at GET / for trying the API by hand.
HTML_PAGE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>AI Task Manager</title>
    <style>
      body { font-family: Arial, sans-serif; margin: 2rem; }
      #chat { max-width: 600px; margin: auto; }
      .message { margin-bottom: 1rem; white-space: pre-wrap; }
      .user { text-align: right; font-weight: bold; }
      .assistant { text-align: left; color: #2c3e50; }
      #input { width: 100%; padding: 0.5rem; }
      #send { padding: 0.5rem 1rem; }
    </style>
  </head>
  <body>
    <h1>AI Task Manager</h1>
    <div id="chat"></div>
    <div>
      <input id="input" type="text" placeholder="Type a message..." />
      <button id="send">Send</button>
    </div>
    <script>
      const chat = document.getElementById('chat');
      const input = document.getElementById('input');
      const send = document.getElementById('send');
      const userId = 'demo-user';

      function addMessage(text, role) {
        const div = document.createElement('div');
        div.className = 'message ' + role;
        div.textContent = text;
        chat.appendChild(div);
      }

      async function sendMessage() {
        const message = input.value.trim();
        if (!message) return;
        addMessage(message, 'user');
        input.value = '';
        const res = await fetch('/api/chat', {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify({ userId, message }),
        });
        const data = await res.json();
        addMessage(data.reply ?? data.detail, 'assistant');
      }

      send.addEventListener('click', sendMessage);
      input.addEventListener('keydown', (e) => { if (e.key === 'Enter') sendMessage(); });
    </script>
  </body>
</html>
"""
