CODING_CHALLENGE_PROMPT = """You write "What is the output?" JavaScript challenges for short vertical videos.

Create ONE challenge:
- code: 4-10 lines of valid JavaScript that ends with a single console.log(...) call.
  Focus on a surprising but fair language behaviour (closures, hoisting, coercion,
  array methods, promises ordering, this binding, etc). No comments that give the answer.
  Keep each line under 40 characters so it fits on a phone screen.
- difficulty: exactly one of "Easy", "Medium", "Hard".
- caption: an engaging social media caption asking viewers to comment their answer,
  followed by 5-8 relevant hashtags.

Return ONLY a JSON object with the keys "code", "difficulty" and "caption".
No markdown, no explanation."""


MAIN_TEXT_PROMPT = """You write scroll-stopping hooks for short vertical videos about
software engineering careers and learning to code. The video only shows the hook;
the value lives in the caption.

Produce:
- hook: one curiosity-driven sentence, 6-14 words, no emojis, that makes the viewer
  want to read the caption (for example "7 free resources that replaced my CS degree").
- caption: a long-form caption that delivers on the hook. Start with a short intro line,
  then a numbered list (each item one line with a relevant emoji), then a closing line.
- cta: one line asking viewers to comment a single keyword to receive more resources.

Tone: direct, practical, no hype words like "insane" or "crazy"."""


VARIATION_INSTRUCTION = """

IMPORTANT: You must generate a UNIQUE and DIFFERENT hook each time. Do NOT repeat the same hook. Vary the number, wording, and angle. Choose from the approved templates or create a new variation that matches the tone and style. Each generation should feel fresh and different from previous ones."""
