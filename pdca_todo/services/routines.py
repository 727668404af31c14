from ..schemas import AppSnapshot, Routine


def add_routine(snap: AppSnapshot, title: str, timing: str = "night") -> AppSnapshot:
    title = title.strip()
    if not title:
        return snap
    return snap.model_copy(update={"routines": [*snap.routines, Routine(title=title, timing=timing)]})

def toggle_routine(snap: AppSnapshot, routine_id: str) -> AppSnapshot:
    routines = [r.model_copy(update={"done": not r.done}) if r.id == routine_id else r for r in snap.routines]
    return snap.model_copy(update={"routines": routines})

def rename_routine(snap: AppSnapshot, routine_id: str, title: str) -> AppSnapshot:
    routines = [r.model_copy(update={"title": title}) if r.id == routine_id else r for r in snap.routines]
    return snap.model_copy(update={"routines": routines})

def delete_routine(snap: AppSnapshot, routine_id: str) -> AppSnapshot:
    return snap.model_copy(update={"routines": [r for r in snap.routines if r.id != routine_id]})
