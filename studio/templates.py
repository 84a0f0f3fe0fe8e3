"""Starter files for a new project."""

STARTER_INDEX_HTML = """<!DOCTYPE html>
<html lang="pt-br">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>AI-CRAFT Studio</title>
    <script src="https://cdn.tailwindcss.com"></script>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/main.tsx"></script>
  </body>
</html>"""

STARTER_MAIN_TSX = """import React from 'react';
import ReactDOM from 'react-dom/client';
import { App } from './App';

const root = ReactDOM.createRoot(document.getElementById('root')!);
root.render(
  <React.StrictMode>
    <App />
  </React.StrictMode>
);"""

STARTER_APP_TSX = """import React from 'react';

export const App = () => {
  return null;
};"""

STARTER_TYPES_TS = """export interface User {
  id: string;
  name: string;
}"""


def starter_files() -> dict[str, str]:
    """Return a fresh copy of the files every new project starts with."""
    return {
        "index.html": STARTER_INDEX_HTML,
        "main.tsx": STARTER_MAIN_TSX,
        "App.tsx": STARTER_APP_TSX,
        "types.ts": STARTER_TYPES_TS,
    }
