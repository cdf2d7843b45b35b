"""Browser client served by the API server for generating, taking and sharing quizzes."""

QUIZ_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>QuizGen</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; max-width: 60rem; margin-inline: auto; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none; }
      label { display: block; margin-top: 0.75rem; color: #94a3b8; }
      input, select { width: 100%; padding: 0.6rem; border-radius: 0.5rem; border: 1px solid #334155; background: #0b1120; color: #f5f7ff; font-size: 1rem; box-sizing: border-box; }
      input[type=checkbox] { width: auto; }
      .primary-button { border: none; border-radius: 0.75rem; padding: 0.85rem 1.5rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; margin-top: 1rem; }
      .primary-button:hover { background: #16808a; }
      .primary-button:disabled { opacity: 0.6; cursor: not-allowed; }
      .secondary-button { border: 1px solid #334155; border-radius: 0.75rem; padding: 0.6rem 1.1rem; background: transparent; color: #f5f7ff; cursor: pointer; }
      .toolbar { display: flex; gap: 0.5rem; align-items: center; justify-content: space-between; flex-wrap: wrap; }
      #timer { font-size: 1.3rem; font-weight: 700; color: #facc15; }
      #question-container { min-height: 5rem; font-size: 1.1rem; line-height: 1.6; }
      .options-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(220px, 1fr)); gap: 0.75rem; }
      .option-button { border: 2px solid transparent; border-radius: 0.75rem; padding: 1rem; font-size: 1rem; background: #1e293b; color: #fff; cursor: pointer; text-align: left; }
      .option-button.selected { border-color: #1f9aa5; background: #16808a; }
      .navigator { display: flex; flex-wrap: wrap; gap: 0.4rem; }
      .nav-cell { width: 2.4rem; height: 2.4rem; border-radius: 0.5rem; border: 2px solid transparent; color: #0b1120; font-weight: 700; cursor: pointer; }
      .nav-cell.answered { background: #22c55e; }
      .nav-cell.review { background: #a855f7; }
      .nav-cell.unanswered { background: #e2e8f0; }
      .nav-cell.current { border-color: #facc15; }
      .correct { color: #22c55e; }
      .wrong { color: #ef4444; }
      .stats { display: grid; grid-template-columns: repeat(auto-fit, minmax(8rem, 1fr)); gap: 0.75rem; }
      .stat { background: #1e293b; border-radius: 0.5rem; padding: 0.75rem; text-align: center; }
      .stat strong { display: block; font-size: 1.4rem; }
      #status { min-height: 1.25rem; color: #f87171; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"></script>
  </head>
  <body>
    <section class="card" id="setup-card">
      <h1>QuizGen</h1>
      <label>Topic <input id="topic" placeholder="e.g. The French Revolution" /></label>
      <label>Number of questions <input id="num-questions" type="number" min="1" max="50" value="10" /></label>
      <label>Difficulty
        <select id="difficulty">
          <option value="easy">Easy</option>
          <option value="medium" selected>Medium</option>
          <option value="hard">Hard</option>
          <option value="mix">Mix</option>
        </select>
      </label>
      <label>Time limit (minutes) <input id="timer-minutes" type="number" min="1" max="300" value="10" /></label>
      <label><input id="negative-marking" type="checkbox" /> Negative marking</label>
      <label>Penalty per wrong answer
        <select id="penalty" disabled>
          <option value="-0.25">-0.25</option>
          <option value="-0.5">-0.5</option>
          <option value="-0.75">-0.75</option>
          <option value="-1">-1</option>
        </select>
      </label>
      <button id="generate-button" class="primary-button">Generate Quiz</button>
    </section>
    <section class="card hidden" id="shared-card">
      <h1 id="shared-title">Shared quiz</h1>
      <p id="shared-details"></p>
      <label>Your name <input id="guest-name" /></label>
      <button id="shared-start-button" class="primary-button">Start Quiz</button>
    </section>
    <section class="card hidden" id="quiz-card">
      <div class="toolbar">
        <span id="progress"></span>
        <span id="timer"></span>
      </div>
      <div id="question-container"></div>
      <div id="options-container" class="options-grid"></div>
      <div class="toolbar" style="margin-top: 1rem;">
        <button id="prev-button" class="secondary-button">Previous</button>
        <button id="review-button" class="secondary-button">Mark for Review</button>
        <button id="next-button" class="secondary-button">Next</button>
        <button id="submit-button" class="primary-button">Submit Quiz</button>
      </div>
      <h3>Questions</h3>
      <div id="navigator" class="navigator"></div>
    </section>
    <section class="card hidden" id="result-card">
      <h1>Results</h1>
      <div id="stats" class="stats"></div>
      <div class="toolbar" style="margin-top: 1rem;">
        <button id="save-button" class="secondary-button">Save to history</button>
        <button id="share-button" class="secondary-button">Share quiz</button>
        <button id="new-button" class="secondary-button">New quiz</button>
      </div>
      <p id="share-link"></p>
      <div id="review"></div>
    </section>
    <p id="status"></p>
    <script>
      const $ = (id) => document.getElementById(id);
      const LETTERS = ['A', 'B', 'C', 'D'];
      let ownerId = localStorage.getItem('quizgen-owner');
      if (!ownerId) {
        ownerId = crypto.randomUUID();
        localStorage.setItem('quizgen-owner', ownerId);
      }
      let session = null;
      let pollHandle = null;
      const sharedMatch = window.location.pathname.match(/^\\/quiz\\/shared\\/([^/]+)/);
      const shareToken = sharedMatch ? decodeURIComponent(sharedMatch[1]) : null;

      function show(cardId) {
        for (const id of ['setup-card', 'shared-card', 'quiz-card', 'result-card']) {
          $(id).classList.toggle('hidden', id !== cardId);
        }
      }

      function typeset() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise();
        }
      }

      async function api(method, path, body) {
        const response = await fetch(path, {
          method,
          headers: { 'Content-Type': 'application/json' },
          body: body === undefined ? undefined : JSON.stringify(body),
        });
        if (!response.ok) {
          let detail = response.statusText;
          try {
            const payload = await response.json();
            detail = typeof payload.detail === 'string' ? payload.detail : JSON.stringify(payload.detail);
          } catch (err) {}
          throw new Error(detail);
        }
        return response.status === 204 ? null : response.json();
      }

      function setStatus(message) {
        $('status').textContent = message || '';
      }

      function render(view) {
        session = view;
        if (view.submitted) {
          stopPolling();
          renderResult(view);
          return;
        }
        show('quiz-card');
        const index = view.current_index;
        const question = view.questions[index];
        const answer = view.answers[index];
        $('progress').textContent = `Question ${index + 1} of ${view.questions.length}`;
        $('timer').textContent = view.remaining;
        $('question-container').innerHTML = question.question_html;
        const options = $('options-container');
        options.innerHTML = '';
        question.options_html.forEach((html, optionIndex) => {
          const button = document.createElement('button');
          button.className = 'option-button' + (answer.selected_option === optionIndex ? ' selected' : '');
          button.innerHTML = `<strong>${LETTERS[optionIndex]}.</strong> ${html}`;
          button.onclick = () => act('select', { option_index: optionIndex });
          options.appendChild(button);
        });
        $('review-button').textContent = answer.marked_for_review ? 'Unmark Review' : 'Mark for Review';
        $('prev-button').disabled = index === 0;
        $('next-button').disabled = index === view.questions.length - 1;
        const navigator = $('navigator');
        navigator.innerHTML = '';
        view.answers.forEach((item, itemIndex) => {
          const cell = document.createElement('button');
          cell.className = `nav-cell ${item.status}` + (itemIndex === index ? ' current' : '');
          cell.textContent = itemIndex + 1;
          cell.onclick = () => act('goto', { index: itemIndex });
          navigator.appendChild(cell);
        });
        typeset();
      }

      function renderResult(view) {
        show('result-card');
        const result = view.result;
        const stats = [
          ['Score', result.score],
          ['Percentage', `${result.percentage}%`],
          ['Correct', result.correct_answers],
          ['Wrong', result.wrong_answers],
          ['Unanswered', result.unanswered],
          ['Time taken', result.time_taken],
        ];
        $('stats').innerHTML = stats.map(([label, value]) => `<div class="stat"><strong>${value}</strong>${label}</div>`).join('');
        $('save-button').classList.toggle('hidden', Boolean(view.share_token));
        $('share-button').classList.toggle('hidden', Boolean(view.share_token));
        $('review').innerHTML = view.questions.map((question, index) => {
          const outcome = result.answers[index];
          const chosen = outcome.selected_option === null ? 'Not answered' : LETTERS[outcome.selected_option];
          const css = outcome.is_correct ? 'correct' : 'wrong';
          return `<div class="card" style="margin-top: 0.75rem;">
            <div>${index + 1}. ${question.question_html}</div>
            <p class="${css}">Your answer: ${chosen}</p>
            <p class="correct">Correct answer: ${LETTERS[question.correct_answer]}. ${question.options_html[question.correct_answer]}</p>
            <div>${question.explanation_html}</div>
          </div>`;
        }).join('');
        typeset();
      }

      async function act(action, body) {
        if (!session) return;
        try {
          render(await api('POST', `/api/sessions/${session.session_id}/${action}`, body || {}));
          setStatus('');
        } catch (err) {
          setStatus(err.message);
        }
      }

      function startPolling() {
        stopPolling();
        pollHandle = setInterval(async () => {
          if (!session) return;
          try {
            const view = await api('GET', `/api/sessions/${session.session_id}`);
            if (view.submitted) {
              render(view);
            } else {
              session = view;
              $('timer').textContent = view.remaining;
            }
          } catch (err) {
            setStatus(err.message);
          }
        }, 1000);
      }

      function stopPolling() {
        if (pollHandle) {
          clearInterval(pollHandle);
          pollHandle = null;
        }
      }

      async function beginSession(payload) {
        const view = await api('POST', '/api/sessions', payload);
        render(view);
        startPolling();
      }

      $('negative-marking').onchange = () => {
        $('penalty').disabled = !$('negative-marking').checked;
      };
      $('num-questions').onchange = () => {
        $('timer-minutes').value = $('num-questions').value;
      };

      $('generate-button').onclick = async () => {
        const topic = $('topic').value.trim();
        if (!topic) {
          setStatus('Please enter a quiz topic.');
          return;
        }
        const negative = $('negative-marking').checked;
        $('generate-button').disabled = true;
        $('generate-button').textContent = 'Generating Quiz...';
        setStatus('');
        try {
          const generated = await api('POST', '/api/quizzes/generate', {
            topic,
            num_questions: Number($('num-questions').value),
            difficulty: $('difficulty').value,
            timer_minutes: Number($('timer-minutes').value),
            negative_marking: negative,
            penalty: negative ? Number($('penalty').value) : 0,
          });
          await beginSession({
            questions: generated.questions.map((q) => ({
              id: q.id, question: q.question, options: q.options,
              correct_answer: q.correct_answer, explanation: q.explanation,
            })),
            settings: generated.settings,
          });
        } catch (err) {
          setStatus(err.message);
        } finally {
          $('generate-button').disabled = false;
          $('generate-button').textContent = 'Generate Quiz';
        }
      };

      $('prev-button').onclick = () => act('previous');
      $('next-button').onclick = () => act('next');
      $('review-button').onclick = () => act('review');
      $('submit-button').onclick = () => {
        const unanswered = session.answers.filter((item) => item.selected_option === null).length;
        if (unanswered === 0 || confirm(`You have ${unanswered} unanswered question(s). Submit anyway?`)) {
          act('submit');
        }
      };

      $('save-button').onclick = async () => {
        try {
          const attempt = await api('POST', `/api/sessions/${session.session_id}/save`, { owner_id: ownerId });
          session.quiz_id = attempt.quiz_id;
          session.attempt_id = attempt.id;
          setStatus('Attempt saved to your history.');
        } catch (err) {
          setStatus(err.message);
        }
      };

      $('share-button').onclick = async () => {
        try {
          if (!session.attempt_id) {
            const attempt = await api('POST', `/api/sessions/${session.session_id}/save`, { owner_id: ownerId });
            session.quiz_id = attempt.quiz_id;
            session.attempt_id = attempt.id;
          }
          const shared = await api('POST', `/api/quizzes/${session.quiz_id}/share`, { owner_id: ownerId });
          $('share-link').textContent = shared.share_url;
        } catch (err) {
          setStatus(err.message);
        }
      };

      $('new-button').onclick = async () => {
        if (session) {
          await api('DELETE', `/api/sessions/${session.session_id}`).catch(() => null);
          session = null;
        }
        if (shareToken) {
          window.location.href = '/';
          return;
        }
        $('share-link').textContent = '';
        show('setup-card');
      };

      $('shared-start-button').onclick = async () => {
        const guestName = $('guest-name').value.trim();
        if (!guestName) {
          setStatus('Please enter your name to continue.');
          return;
        }
        try {
          await beginSession({ share_token: shareToken, guest_name: guestName });
          setStatus('');
        } catch (err) {
          setStatus(err.message);
        }
      };

      async function openSharedQuiz() {
        show('shared-card');
        try {
          const shared = await api('GET', `/api/shared/${encodeURIComponent(shareToken)}`);
          const settings = shared.settings;
          $('shared-title').textContent = settings.topic;
          $('shared-details').textContent = `${settings.total_questions} questions, ${settings.difficulty}, ${settings.timer_minutes} minutes`
            + (settings.negative_marking ? `, ${settings.penalty} per wrong answer` : '');
        } catch (err) {
          $('shared-title').textContent = 'Quiz not found';
          $('shared-start-button').disabled = true;
          setStatus(err.message);
        }
      }

      if (shareToken) {
        openSharedQuiz();
      } else {
        show('setup-card');
      }
    </script>
  </body>
</html>
"""
