"""HTML answer form for a pending question."""

import html as html_lib
import json
import math

from notifier.ask.registry import PendingQuestion


def build_answer_page(question: PendingQuestion) -> str:
    """Render the form; the countdown starts at the question's remaining time."""
    escape = html_lib.escape
    title = escape(question.title or "Question")
    body = escape(question.question)
    seconds = math.ceil(question.remaining_seconds())
    answer_url = json.dumps(f"/api/answer/{question.id}")

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Answer Question</title>
  <style>
    body {{ font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial,sans-serif;
           max-width:800px; margin:0 auto; padding:20px; color:#333; line-height:1.6; }}
    h1 {{ color:#2c3e50; border-bottom:1px solid #eee; padding-bottom:10px; }}
    .question {{ background:#f9f9f9; border-left:4px solid #3498db; padding:15px; margin-bottom:20px;
                border-radius:0 4px 4px 0; white-space:pre-wrap; }}
    .timer {{ color:#e74c3c; font-weight:bold; padding:5px 0; margin-bottom:15px; }}
    textarea {{ width:100%; min-height:150px; padding:12px; border:1px solid #ddd; border-radius:4px;
               margin-bottom:15px; font-family:inherit; box-sizing:border-box; }}
    button {{ background:#3498db; color:#fff; border:none; padding:10px 20px; border-radius:4px;
             cursor:pointer; font-size:16px; }}
    button:hover {{ background:#2980b9; }}
    button:disabled {{ background:#95a5a6; cursor:default; }}
  </style>
</head>
<body>
  <h1>{title}</h1>
  <div class="question">{body}</div>
  <div class="timer" id="timer" data-seconds="{seconds}">Time remaining: {seconds} seconds</div>
  <textarea id="answer" placeholder="Type your answer here..."></textarea>
  <button id="send">Send Answer</button>
  <script>
    const timer = document.getElementById('timer');
    const answer = document.getElementById('answer');
    const send = document.getElementById('send');
    let timeLeft = {seconds};

    function lock(text) {{
      clearInterval(timerId);
      timer.textContent = text;
      send.disabled = true;
      answer.disabled = true;
    }}

    const timerId = setInterval(() => {{
      timeLeft -= 1;
      if (timeLeft <= 0) {{
        lock('Time expired');
      }} else {{
        timer.textContent = 'Time remaining: ' + timeLeft + ' seconds';
      }}
    }}, 1000);

    send.addEventListener('click', async () => {{
      if (!answer.value.trim()) {{
        alert('Please enter an answer before submitting.');
        return;
      }}
      try {{
        const response = await fetch({answer_url}, {{
          method: 'POST',
          headers: {{ 'Content-Type': 'application/json' }},
          body: JSON.stringify({{ answer: answer.value }}),
        }});
        if (response.ok) {{
          lock('Answer submitted');
        }} else {{
          const data = await response.json();
          alert('Failed to submit answer: ' + (data.error || 'Unknown error'));
        }}
      }} catch (error) {{
        alert('An error occurred while submitting your answer.');
      }}
    }});
  </script>
</body>
</html>"""
