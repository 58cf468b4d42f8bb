"""String dictionaries for every supported locale.

``EN`` is the reference dictionary: it defines the full key set. Other
dictionaries may lag behind; lookups fall back to ``EN`` for missing keys.
"""

EN: dict[str, str] = {
    "app.title": "Code Chrono",
    "timer.start": "Start",
    "timer.pause": "Pause",
    "timer.resume": "Resume",
    "timer.reset": "Reset",
    "timer.phase.work": "Focus",
    "timer.phase.short_break": "Short break",
    "timer.phase.long_break": "Long break",
    "tasks.title": "Tasks",
    "tasks.search": "Search tasks…",
    "tasks.status.todo": "To do",
    "tasks.status.doing": "In progress",
    "tasks.status.done": "Done",
    "settings.theme": "Theme",
    "settings.language": "Language",
    "settings.idle_minutes": "Auto-pause after idle (minutes)",
}

PT: dict[str, str] = {
    "app.title": "Code Chrono",
    "timer.start": "Iniciar",
    "timer.pause": "Pausar",
    "timer.resume": "Retomar",
    "timer.reset": "Repor",
    "timer.phase.work": "Foco",
    "timer.phase.short_break": "Pausa curta",
    "timer.phase.long_break": "Pausa longa",
    "tasks.title": "Tarefas",
    "tasks.search": "Procurar tarefas…",
    "tasks.status.todo": "Por fazer",
    "tasks.status.doing": "Em curso",
    "tasks.status.done": "Concluída",
    "settings.theme": "Tema",
    "settings.language": "Idioma",
    "settings.idle_minutes": "Pausa automática após inatividade (minutos)",
}

BR: dict[str, str] = {
    "app.title": "Code Chrono",
    "timer.start": "Iniciar",
    "timer.pause": "Pausar",
    "timer.resume": "Continuar",
    "timer.reset": "Zerar",
    "timer.phase.work": "Foco",
    "timer.phase.short_break": "Pausa curta",
    "timer.phase.long_break": "Pausa longa",
    "tasks.title": "Tarefas",
    "tasks.search": "Buscar tarefas…",
    "tasks.status.todo": "A fazer",
    "tasks.status.doing": "Em andamento",
    "tasks.status.done": "Concluída",
    "settings.theme": "Tema",
    "settings.language": "Idioma",
    "settings.idle_minutes": "Pausar automaticamente após inatividade (minutos)",
}

ES: dict[str, str] = {
    "app.title": "Code Chrono",
    "timer.start": "Iniciar",
    "timer.pause": "Pausar",
    "timer.resume": "Reanudar",
    "timer.reset": "Reiniciar",
    "timer.phase.work": "Enfoque",
    "timer.phase.short_break": "Descanso corto",
    "timer.phase.long_break": "Descanso largo",
    "tasks.title": "Tareas",
    "tasks.search": "Buscar tareas…",
    "tasks.status.todo": "Pendiente",
    "tasks.status.doing": "En curso",
    "tasks.status.done": "Hecha",
    "settings.theme": "Tema",
    "settings.language": "Idioma",
    "settings.idle_minutes": "Pausa automática por inactividad (minutos)",
}

EL: dict[str, str] = {
    "app.title": "Code Chrono",
    "timer.start": "Έναρξη",
    "timer.pause": "Παύση",
    "timer.resume": "Συνέχεια",
    "timer.reset": "Επαναφορά",
    "timer.phase.work": "Συγκέντρωση",
    "timer.phase.short_break": "Σύντομο διάλειμμα",
    "timer.phase.long_break": "Μεγάλο διάλειμμα",
    "tasks.title": "Εργασίες",
    "tasks.search": "Αναζήτηση εργασιών…",
    "tasks.status.todo": "Προς υλοποίηση",
    "tasks.status.doing": "Σε εξέλιξη",
    "tasks.status.done": "Ολοκληρώθηκε",
    "settings.theme": "Θέμα",
    "settings.language": "Γλώσσα",
}
